"""View state enumeration"""
from enum import Enum


class ViewState(str, Enum):
    """Top-level screens"""
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    CONVERSING = "conversing"
    ADMINISTERING = "administering"
    UPGRADING = "upgrading"
