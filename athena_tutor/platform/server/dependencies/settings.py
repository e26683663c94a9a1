from fastapi import Request

from athena_tutor.platform.settings import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
