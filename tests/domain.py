"""
Domain types shared by the test suite.

Covers every identifier flavour the facades handle:
- Task: str id (generated as UUID text)
- Device: uuid.UUID id
- Order, Invoice: StringConvertibleId id, sharing id values in one collection
- Counter: int id (no generation)
- Account: persisted through a DTO with a different shape
"""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, RootModel

from docmodel import Entity, ValueObject


class Task(Entity):
    id: Optional[str] = None
    title: str
    done: bool = False
    priority: int = 0


class Note(Entity):
    id: Optional[str] = None
    text: str


class Device(Entity):
    id: Optional[uuid.UUID] = None
    name: str


class OrderId(RootModel[str], frozen=True):
    @classmethod
    def from_string(cls, value: str) -> OrderId:
        return cls(value)


class BrokenId(RootModel[str], frozen=True):
    @classmethod
    def from_string(cls, value: str) -> BrokenId:
        raise ValueError("cannot parse")


class Order(Entity):
    id: Optional[OrderId] = None
    total: int


class Invoice(Entity):
    id: Optional[OrderId] = None
    total: int


class Shipment(Entity):
    id: Optional[BrokenId] = None


class Counter(Entity):
    id: int = 0
    value: int = 0


class Tag(ValueObject):
    name: str


class Money(ValueObject):
    amount: int
    currency: str


class Account(Entity):
    id: Optional[str] = None
    owner_name: str
    balance: int


class AccountDto(BaseModel):
    id: str
    ownerName: str
    balanceCents: int


def account_to_dto(account: Account) -> AccountDto:
    return AccountDto(id=account.id, ownerName=account.owner_name, balanceCents=account.balance * 100)


def account_from_dto(dto: AccountDto) -> Account:
    return Account(id=dto.id, owner_name=dto.ownerName, balance=dto.balanceCents // 100)


class MoneyDto(BaseModel):
    value: str


def money_to_dto(money: Money) -> MoneyDto:
    return MoneyDto(value=f"{money.amount} {money.currency}")


def money_from_dto(dto: MoneyDto) -> Money:
    amount, currency = dto.value.split(" ")
    return Money(amount=int(amount), currency=currency)
