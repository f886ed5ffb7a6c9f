from .card_widget import LINK_PROPERTY, CardWidget, LinkLabel
from .profile_form import ProfileFormPanel

__all__ = ["CardWidget", "LINK_PROPERTY", "LinkLabel", "ProfileFormPanel"]
