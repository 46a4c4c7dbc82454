from __future__ import annotations

from typing import Awaitable, Callable

import discord

from ..menus import ButtonSpec, Menu, all_buttons

ButtonHandler = Callable[[discord.Interaction, str], Awaitable[None]]


class MenuButton(discord.ui.Button["MenuView"]):
    def __init__(self, button: ButtonSpec, *, row: int | None = None) -> None:
        super().__init__(
            label=button.label,
            custom_id=button.token,
            style=discord.ButtonStyle.secondary,
            row=row,
        )
        self.token = button.token

    async def callback(self, interaction: discord.Interaction) -> None:
        if self.view is None:
            return
        await self.view.on_press(interaction, self.token)


class MenuView(discord.ui.View):
    """Button grid whose presses are forwarded as opaque tokens."""

    def __init__(self, on_press: ButtonHandler, *, timeout: float | None = None) -> None:
        super().__init__(timeout=timeout)
        self._on_press = on_press

    async def on_press(self, interaction: discord.Interaction, token: str) -> None:
        await self._on_press(interaction, token)

    @property
    def tokens(self) -> list[str]:
        return [item.token for item in self.children if isinstance(item, MenuButton)]

    @classmethod
    def from_menu(cls, menu: Menu, on_press: ButtonHandler, *, timeout: float | None = None) -> "MenuView":
        view = cls(on_press, timeout=timeout)
        for row_index, row in enumerate(menu):
            for button in row:
                view.add_item(MenuButton(button, row=row_index))
        return view

    @classmethod
    def persistent(cls, on_press: ButtonHandler) -> "MenuView":
        # Registered once at startup so buttons keep working after a restart.
        view = cls(on_press, timeout=None)
        for button in all_buttons():
            view.add_item(MenuButton(button))
        return view
