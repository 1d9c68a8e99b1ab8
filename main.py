from __future__ import annotations

from fastapi import FastAPI

from digital_twin.app.api.app import create_app

app = create_app()


def mount_chat_interface(application: FastAPI) -> None:
    from chainlit.utils import mount_chainlit

    mount_chainlit(app=application, target="digital_twin/chainlit_app.py", path="/chat")


mount_chat_interface(app)
