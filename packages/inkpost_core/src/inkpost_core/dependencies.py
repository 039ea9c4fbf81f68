from fastapi import Request

from .config import InkpostSettings, inkpost_settings


def get_settings(request: Request) -> InkpostSettings:
    """Settings the running app was built with, else the process default."""
    return getattr(request.app.state, "settings", None) or inkpost_settings
