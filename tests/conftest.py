"""Shared models and fixtures for DazzleBind tests."""

from dataclasses import dataclass
from typing import List, Optional

import pytest

from dazzlebind import Context, ObservableList, ObservableValue
from dazzlebind.testing import BindingTestHelper


class Item:
    """Simple reference-type element used in collections."""

    def __init__(self, name: str, weight: int = 1):
        self.name = name
        self.weight = weight

    def __repr__(self) -> str:
        return f"Item({self.name!r})"


@dataclass
class Stats:
    health: int = 10
    armor: int = 0


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0


class Player:
    """Host object exercising every accessor kind."""

    stats: Stats
    title: Optional[str] = None
    inventory: Optional[List[Stats]] = None

    def __init__(self):
        self.Health = 10
        self.stats = Stats()
        self.items = [Item(f"item{i}") for i in range(5)]
        self.backpack = ObservableList([Item("rope")])
        self.position = Position()
        self.first_name = "Ada"
        self.last_name = "Lovelace"
        self._level = 1

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def level(self) -> int:
        return self._level

    @level.setter
    def level(self, value: int) -> None:
        self._level = value

    def greet(self) -> str:
        return f"Hello, {self.first_name}"


class Squad:
    """Host with an optional, declared-but-unset member."""

    leader: Optional[Player] = None

    def __init__(self):
        self.members = [Player(), Player()]


class Hero:
    """Host with a push source next to its property."""

    def __init__(self, health: int = 100):
        self.healthProperty = ObservableValue(health)

    @property
    def health(self) -> int:
        return self.healthProperty.value

    @health.setter
    def health(self, value: int) -> None:
        self.healthProperty.value = value


class Game:
    def __init__(self):
        self.hero = Hero()
        self.player = Player()


@pytest.fixture
def player():
    return Player()


@pytest.fixture
def ctx(player):
    return Context(player)


@pytest.fixture
def helper(ctx):
    return BindingTestHelper(ctx)
