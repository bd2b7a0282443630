"""
Menu and contact mail endpoints.
"""

from __future__ import annotations

from ..http import GET, POST, Controller, Request, Response
from ..services import ContactService, MenuService
from .base import respond


class MenuController(Controller):
    prefix = "/menu"
    tags = ["Catalog"]

    def __init__(self, menu: MenuService):
        self.menu = menu

    @GET()
    async def get_menu(self, request: Request) -> Response:
        """Category -> brand product counts."""
        result = await self.menu.compute_menu()
        return respond(result, body=lambda r: {"menu": r.get("menu")})


class ContactController(Controller):
    prefix = "/email"
    tags = ["Contact"]

    def __init__(self, contact: ContactService):
        self.contact = contact

    @POST()
    async def send(self, request: Request) -> Response:
        data, _ = await request.data()
        result = await self.contact.send_contact_email(data.get("subject"), data.get("message"))
        return respond(result, message="Email Sent")
