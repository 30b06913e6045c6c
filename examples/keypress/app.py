"""Key press — a custom page, an injected user lookup, and a redirect.

Typing a key sends a ``keyPress`` event. If the key belongs to a known
user the shell redirects to ``authentication/logout``; otherwise the
page re-renders in place.

Validate it::

    perch check examples.keypress.app:app
    perch routes examples.keypress.app:app
"""

from pathlib import Path

from perch import (
    App,
    AppConfig,
    ElementsController,
    Features,
    MenuItem,
    Page,
    Route,
    ShellConfig,
    action,
    on,
)
from perch.config import UserFeatures
from perch.elements import ContentBlank, Header
from perch.security import SecurityService

TEMPLATES_DIR = Path(__file__).parent / "templates"


class InMemoryDirectory:
    """SecurityService backed by a dict of external id → user name."""

    def __init__(self, users: dict[str, str]) -> None:
        self._users = users

    async def get_user_by_external_id(self, external_id: str) -> str | None:
        return self._users.get(external_id)


app = App(
    AppConfig(
        template_dir=TEMPLATES_DIR,
        shell=ShellConfig(
            title="Key press",
            home=Route("keyPress"),
            features=Features(
                user=UserFeatures(
                    (MenuItem("Sign out", "authentication", "logout", icon="fa-solid fa-door-open"),)
                ),
            ),
        ),
    )
)

directory = InMemoryDirectory({"42": "ada"})
app.provide(SecurityService, lambda: directory)


@app.component(view_path="/custom/")
class CustomPage(Page):
    slots = ("header", "content")

    def build(self) -> None:
        self.header = self.create_component(
            Header, title=self.title or "Press a key", icon="fa-solid fa-keyboard"
        )
        self.content = self.create_component(ContentBlank, "content")


@app.controller
class KeyPressController(ElementsController):
    security: SecurityService

    @on("keyPress")
    async def on_key_press(self) -> None:
        user = await self.security.get_user_by_external_id(self.event.keyPressed)
        if user is None:
            self.display()
        else:
            self.display("authentication", "logout")

    @action
    def index(self) -> Page:
        return self.create_page(CustomPage)


@app.controller
class AuthenticationController(ElementsController):
    @action
    def logout(self) -> Page:
        return self.create_page(CustomPage, title="Signed out")
