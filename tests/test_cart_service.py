import time

import pytest

from app.data.models.card import CardSetModel
from app.data.models.cart_item import CartLineModel
from app.domain.errors import InsufficientStockError, NotFoundError, RequestTimeoutError, ValidationError
from app.services.cart_service import CartService
from app.utils.deadline import request_deadline, start_deadline
from app.utils.settings import STOCK_POLICY_DECOUPLED, STOCK_POLICY_RESERVE


@pytest.fixture()
def card(make_card):
    return make_card("Blue-Eyes White Dragon")


@pytest.fixture()
def user(make_user):
    return make_user()


def _stock(db, card_set_id):
    db.expire_all()
    return db.get(CardSetModel, card_set_id).quantity


class TestAddToCart:
    def test_add_creates_line_and_leaves_stock(self, db, user, card):
        card_set = card.sets[0]
        line = CartService(db).add_to_cart(user.id, card.id, card_set.id, 2)

        assert line.quantity == 2
        assert _stock(db, card_set.id) == 5

    def test_add_twice_is_one_line_with_summed_quantity(self, db, user, card):
        svc = CartService(db)
        first = svc.add_to_cart(user.id, card.id, card.sets[0].id, 2)
        second = svc.add_to_cart(user.id, card.id, card.sets[0].id, 3)

        assert first.id == second.id
        assert second.quantity == 5

        db.expire_all()
        assert [line.id for line in db.get(type(user), user.id).cart] == [first.id]
        assert db.query(CartLineModel).count() == 1

    def test_set_must_belong_to_card(self, db, user, card, make_card):
        other = make_card("Dark Magician")
        with pytest.raises(NotFoundError):
            CartService(db).add_to_cart(user.id, card.id, other.sets[0].id, 1)
        assert db.query(CartLineModel).count() == 0

    def test_unknown_user(self, db, card):
        with pytest.raises(NotFoundError):
            CartService(db).add_to_cart(999, card.id, card.sets[0].id, 1)

    def test_quantity_must_be_positive(self, db, user, card):
        with pytest.raises(ValidationError):
            CartService(db).add_to_cart(user.id, card.id, card.sets[0].id, 0)


class TestGetCart:
    def test_lines_expand_card(self, db, user, card):
        svc = CartService(db)
        svc.add_to_cart(user.id, card.id, card.sets[0].id, 1)

        cart = svc.get_cart(user.id)
        assert len(cart) == 1
        assert cart[0]["cardId"].name == "Blue-Eyes White Dragon"
        assert cart[0]["setId"] == card.sets[0].id
        assert cart[0]["quantity"] == 1

    def test_unknown_user(self, db):
        with pytest.raises(NotFoundError):
            CartService(db).get_cart(42)

    def test_line_for_removed_set_is_skipped(self, db, user, make_card):
        card = make_card("Kuriboh", sets=[{"set_code": "MRD-071", "quantity": 1}, {"set_code": "SDY-016", "quantity": 1}])
        svc = CartService(db)
        svc.add_to_cart(user.id, card.id, card.sets[0].id, 1)
        kept = svc.add_to_cart(user.id, card.id, card.sets[1].id, 1)

        db.query(CardSetModel).filter(CardSetModel.id == card.sets[0].id).delete()
        db.commit()

        assert [line["cartId"] for line in svc.get_cart(user.id)] == [kept.id]


class TestUpdateQuantity:
    def test_decoupled_leaves_stock(self, db, user, card):
        svc = CartService(db, stock_policy=STOCK_POLICY_DECOUPLED)
        line = svc.add_to_cart(user.id, card.id, card.sets[0].id, 2)

        result = svc.update_quantity(user.id, line.id, 3)

        assert result == {"quantity": 3, "quantityDifference": 1}
        assert _stock(db, card.sets[0].id) == 5

    def test_reserve_applies_difference_to_stock(self, db, user, card):
        svc = CartService(db, stock_policy=STOCK_POLICY_RESERVE)
        line = svc.add_to_cart(user.id, card.id, card.sets[0].id, 2)

        svc.update_quantity(user.id, line.id, 3)
        assert _stock(db, card.sets[0].id) == 4

        # rezerwacja pozycji to 1, wiecej nie wraca na stan
        svc.update_quantity(user.id, line.id, 1)
        assert _stock(db, card.sets[0].id) == 5

    def test_reserve_rolls_back_when_stock_short(self, db, user, card):
        svc = CartService(db, stock_policy=STOCK_POLICY_RESERVE)
        line = svc.add_to_cart(user.id, card.id, card.sets[0].id, 1)

        with pytest.raises(InsufficientStockError) as exc:
            svc.update_quantity(user.id, line.id, 10)

        assert exc.value.requested == 9
        assert exc.value.available == 5
        db.expire_all()
        assert db.get(CartLineModel, line.id).quantity == 1
        assert _stock(db, card.sets[0].id) == 5

    def test_line_of_other_user(self, db, user, card, make_user):
        other = make_user("joey_w")
        svc = CartService(db)
        line = svc.add_to_cart(user.id, card.id, card.sets[0].id, 1)

        with pytest.raises(NotFoundError):
            svc.update_quantity(other.id, line.id, 2)

    def test_missing_line(self, db, user):
        with pytest.raises(NotFoundError):
            CartService(db).update_quantity(user.id, 123, 2)

    def test_unknown_policy(self, db):
        with pytest.raises(ValueError):
            CartService(db, stock_policy="hold")


class TestRemoveFromCart:
    def test_remove_then_get_cart(self, db, user, card):
        svc = CartService(db)
        line = svc.add_to_cart(user.id, card.id, card.sets[0].id, 2)

        svc.remove_from_cart(user.id, line.id)

        assert svc.get_cart(user.id) == []
        db.expire_all()
        assert db.get(type(user), user.id).cart == []
        assert db.get(CartLineModel, line.id) is None

    def test_remove_unknown_line(self, db, user):
        with pytest.raises(NotFoundError):
            CartService(db).remove_from_cart(user.id, 77)

    def test_remove_unknown_user(self, db):
        with pytest.raises(NotFoundError):
            CartService(db).remove_from_cart(77, 1)

    def test_remove_other_users_line_keeps_it(self, db, user, card, make_user):
        other = make_user("joey_w")
        svc = CartService(db)
        line = svc.add_to_cart(user.id, card.id, card.sets[0].id, 1)

        with pytest.raises(NotFoundError):
            svc.remove_from_cart(other.id, line.id)
        assert len(svc.get_cart(user.id)) == 1

    def test_reserve_returns_quantity_to_stock(self, db, user, card):
        svc = CartService(db, stock_policy=STOCK_POLICY_RESERVE)
        line = svc.add_to_cart(user.id, card.id, card.sets[0].id, 2)
        svc.update_quantity(user.id, line.id, 4)
        assert _stock(db, card.sets[0].id) == 3

        svc.remove_from_cart(user.id, line.id)
        assert _stock(db, card.sets[0].id) == 5


class TestConcurrentWriters:
    def test_update_reads_line_state_committed_by_another_request(self, db, session_factory, user, card):
        svc = CartService(db, stock_policy=STOCK_POLICY_RESERVE)
        line = svc.add_to_cart(user.id, card.id, card.sets[0].id, 1)

        # drugi request ustawia ta sama ilosc i commituje pierwszy
        other = session_factory()
        try:
            CartService(other, stock_policy=STOCK_POLICY_RESERVE).update_quantity(user.id, line.id, 3)
        finally:
            other.close()

        result = svc.update_quantity(user.id, line.id, 3)

        assert result["quantityDifference"] == 0
        assert _stock(db, card.sets[0].id) == 3
        assert db.get(CartLineModel, line.id).reserved == 2

    def test_mutations_lock_the_line(self, db, user, card, monkeypatch):
        svc = CartService(db, stock_policy=STOCK_POLICY_RESERVE)
        line = svc.add_to_cart(user.id, card.id, card.sets[0].id, 1)

        locks = []
        original = svc.repo.get_user_line

        def tracking_get_user_line(*args, **kwargs):
            locks.append(kwargs.get("for_update", False))
            return original(*args, **kwargs)

        monkeypatch.setattr(svc.repo, "get_user_line", tracking_get_user_line)
        svc.update_quantity(user.id, line.id, 2)
        svc.remove_from_cart(user.id, line.id)

        assert locks == [True, True]

    def test_first_add_collision_becomes_increment(self, db, user, card, monkeypatch):
        svc = CartService(db)
        existing = svc.add_to_cart(user.id, card.id, card.sets[0].id, 2)

        # pierwszy odczyt nie widzi pozycji wstawionej rownolegle
        original = svc.repo.find_line
        calls = []

        def late_find_line(*args, **kwargs):
            calls.append(args)
            if len(calls) == 1:
                return None
            return original(*args, **kwargs)

        monkeypatch.setattr(svc.repo, "find_line", late_find_line)
        line = svc.add_to_cart(user.id, card.id, card.sets[0].id, 3)

        assert line.id == existing.id
        assert line.quantity == 5
        assert db.query(CartLineModel).count() == 1


class TestDeadline:
    def test_expired_deadline_blocks_commit(self, db, user, card):
        token = request_deadline.set(time.monotonic() - 1)
        try:
            with pytest.raises(RequestTimeoutError):
                CartService(db).add_to_cart(user.id, card.id, card.sets[0].id, 1)
        finally:
            request_deadline.reset(token)

        assert db.query(CartLineModel).count() == 0

    def test_live_deadline_commits(self, db, user, card):
        token = start_deadline(30)
        try:
            CartService(db).add_to_cart(user.id, card.id, card.sets[0].id, 1)
        finally:
            request_deadline.reset(token)

        assert db.query(CartLineModel).count() == 1
