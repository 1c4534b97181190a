"""Tests for cart lines, the cart reducer and the persisted cart store."""
from __future__ import annotations

import json
from decimal import Decimal

import pytest

from helpers import FERN, PLANT
from storefront.core.cart_store import CartPersistence, CartStore
from storefront.core.constants import STORAGE_KEY_CART
from storefront.core.exceptions import ValidationException
from storefront.domain.cart import (
    EMPTY_CART,
    AddItem,
    CartLine,
    ClearCart,
    LoadCart,
    RemoveItem,
    SetQuantity,
    reduce_cart,
)


def _line(product_id: str = "p1", quantity: int = 1, price: str = "300") -> CartLine:
    return CartLine(
        product_id=product_id, name=product_id, unit_price=Decimal(price), quantity=quantity
    )


class TestReducer:
    def test_repeated_adds_sum_quantities_on_one_line(self):
        state = EMPTY_CART
        for qty in (1, 2, 4):
            state = reduce_cart(state, AddItem(_line(quantity=qty)))

        assert len(state) == 1
        assert state[0].quantity == 7

    def test_add_keeps_existing_line_fields(self):
        state = reduce_cart(EMPTY_CART, AddItem(_line(price="300")))
        state = reduce_cart(state, AddItem(_line(price="999")))

        assert state[0].unit_price == Decimal("300")
        assert state[0].quantity == 2

    def test_add_appends_new_products_in_order(self):
        state = reduce_cart(EMPTY_CART, AddItem(_line("p1")))
        state = reduce_cart(state, AddItem(_line("p2")))

        assert [line.product_id for line in state] == ["p1", "p2"]

    def test_set_quantity_is_absolute(self):
        state = reduce_cart(EMPTY_CART, AddItem(_line(quantity=3)))
        state = reduce_cart(state, SetQuantity("p1", 5))

        assert state[0].quantity == 5

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_set_quantity_non_positive_matches_remove(self, quantity):
        state = reduce_cart(EMPTY_CART, AddItem(_line("p1")))
        state = reduce_cart(state, AddItem(_line("p2")))

        removed = reduce_cart(state, RemoveItem("p1"))
        assert reduce_cart(state, SetQuantity("p1", quantity)) == removed

    def test_remove_missing_id_is_noop(self):
        state = reduce_cart(EMPTY_CART, AddItem(_line()))
        assert reduce_cart(state, RemoveItem("nope")) == state

    def test_clear_and_load(self):
        state = reduce_cart(EMPTY_CART, AddItem(_line()))
        assert reduce_cart(state, ClearCart()) == EMPTY_CART
        loaded = (_line("p9", 2),)
        assert reduce_cart(state, LoadCart(loaded)) == loaded

    def test_reducer_does_not_mutate_input(self):
        state = (_line(quantity=1),)
        reduce_cart(state, SetQuantity("p1", 4))
        assert state[0].quantity == 1

    def test_can_increase_respects_stock_limit(self):
        line = CartLine("p1", "Monstera", Decimal("300"), quantity=5, stock_limit=5)
        assert not line.can_increase()
        assert CartLine("p2", "Fern", Decimal("150"), quantity=5).can_increase()


class TestCartStore:
    def test_add_persists_before_returning(self, cart, storage):
        cart.add(PLANT, 2)

        stored = json.loads(storage.get(STORAGE_KEY_CART))
        assert stored == [
            {
                "_id": "p1",
                "name": "Monstera",
                "price": 300,
                "qty": 2,
                "stock": 5,
                "image": "monstera.jpg",
            }
        ]

    def test_add_rejects_non_positive_quantity(self, cart, storage):
        with pytest.raises(ValidationException):
            cart.add(PLANT, 0)
        with pytest.raises(ValidationException):
            cart.add(PLANT, -3)

        assert cart.is_empty

    def test_items_count_and_lines(self, cart):
        cart.add(PLANT, 2)
        cart.add(FERN)
        cart.add(PLANT)

        assert cart.items_count == 4
        assert cart.get_line("p1").quantity == 3

    def test_round_trip_through_storage(self, cart, storage):
        cart.add(PLANT, 2)
        cart.add({"_id": "p3", "name": "Snake Plant", "price": 249.5})

        reloaded = CartStore(CartPersistence(storage))
        reloaded.load()

        assert reloaded.lines == cart.lines

    def test_remove_and_set_quantity_zero_are_equivalent(self, cart, storage):
        cart.add(PLANT)
        cart.add(FERN)
        cart.set_quantity("p1", 0)
        after_set = cart.lines

        cart.add(PLANT)
        cart.remove("p1")

        assert cart.lines == after_set
        assert cart.get_line("p1") is None

    def test_clear_persists_empty_cart(self, cart, storage):
        cart.add(PLANT)
        cart.clear()

        assert json.loads(storage.get(STORAGE_KEY_CART)) == []

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            '{"_id": "p1"}',
            '[{"_id": "p1", "name": "x", "price": 10, "qty": 0}]',
            '[{"_id": "p1", "name": "x", "price": -5, "qty": 1}]',
            '[{"name": "x", "price": 10, "qty": 1}]',
            '[{"_id": "p1", "price": 10, "qty": 1}, {"_id": "p1", "price": 10, "qty": 2}]',
            '[{"_id": "p1", "price": 10, "qty": 1.5}]',
        ],
    )
    def test_malformed_storage_loads_as_empty(self, storage, raw):
        storage.set(STORAGE_KEY_CART, raw)

        store = CartStore(CartPersistence(storage))
        assert store.load() == EMPTY_CART

    def test_load_without_stored_cart_is_empty(self, storage):
        assert CartStore(CartPersistence(storage)).load() == EMPTY_CART

    def test_subscribers_see_persisted_state(self, cart, storage):
        seen = []

        def listener(lines):
            seen.append((lines, storage.get(STORAGE_KEY_CART)))

        unsubscribe = cart.subscribe(listener)
        cart.add(PLANT)
        unsubscribe()
        cart.add(FERN)

        assert len(seen) == 1
        lines, raw = seen[0]
        assert lines[0].product_id == "p1"
        assert json.loads(raw)[0]["_id"] == "p1"

    def test_noop_mutation_does_not_notify(self, cart):
        seen = []
        cart.subscribe(seen.append)
        cart.remove("missing")
        assert seen == []
