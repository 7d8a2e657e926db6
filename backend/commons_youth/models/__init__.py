"""Model exports."""
from commons_youth.models.user import User
from commons_youth.models.group import Group
from commons_youth.models.activity import Activity
from commons_youth.models.project import CommunityProject
from commons_youth.models.boundary import ProvinceBoundary

__all__ = [
    "User",
    "Group",
    "Activity",
    "CommunityProject",
    "ProvinceBoundary",
]
