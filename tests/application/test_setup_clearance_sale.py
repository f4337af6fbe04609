"""Integration tests for clearance sale setup, show and on/off toggle."""

from datetime import timedelta
from decimal import Decimal

import pytest

from catalog.application.cache_invalidator import CacheInvalidator
from catalog.application.dto import Actor, ClearanceSaleSetup
from catalog.application.setup_clearance_sale import SetupClearanceSaleHandler
from catalog.application.show_clearance_sale import ShowClearanceSaleHandler
from catalog.application.toggle_clearance_sale import ToggleClearanceSaleHandler
from catalog.domain.exceptions import ConflictError, EntityNotFoundError, ValidationError
from catalog.domain.model.clearance_sale import (
    ADMIN_SALE_OWNER,
    OfferActiveTime,
    SaleDiscountType,
)
from catalog.infrastructure.cache.memory_cache import InMemoryCache
from tests.fakes import NOW, FakeClearanceSaleRepository, fixed_clock

VENDOR = Actor.vendor("v1")
ADMIN = Actor.admin()


def _setup():
    sale_repo = FakeClearanceSaleRepository()
    cache = InMemoryCache()
    handler = SetupClearanceSaleHandler(sale_repo, CacheInvalidator(cache), fixed_clock())
    return handler, sale_repo, cache


def _payload(**overrides) -> dict:
    payload = {
        "startDate": "2026-03-01T00:00:00Z",
        "expireDate": "2026-03-31T23:59:59Z",
        "discountType": "flat",
        "discountAmount": 15,
        "metaTitle": "March clearance",
    }
    payload.update(overrides)
    return payload


def _setup_dto(**overrides) -> ClearanceSaleSetup:
    return ClearanceSaleSetup.from_payload(_payload(**overrides))


class TestSetupCreate:

    def test_creates_config(self):
        handler, sale_repo, _ = _setup()
        config = handler.handle(_setup_dto(), VENDOR)
        assert config.vendor_id == "v1"
        assert config.discount_type is SaleDiscountType.FLAT
        assert config.discount_amount == Decimal("15")
        assert config.is_active is False
        assert config.products == []
        assert config.created_at == NOW
        assert sale_repo.get_by_vendor("v1") is not None

    def test_naive_dates_are_utc(self):
        handler, _, _ = _setup()
        config = handler.handle(_setup_dto(startDate="2026-03-01T00:00:00"), VENDOR)
        assert config.start_date.utcoffset() == timedelta(0)

    def test_admin_config_has_no_vendor(self):
        handler, _, _ = _setup()
        config = handler.handle(_setup_dto(), ADMIN)
        assert config.vendor_id is None
        assert config.owner_key == ADMIN_SALE_OWNER

    def test_dates_required_on_create(self):
        handler, sale_repo, _ = _setup()
        with pytest.raises(ValidationError) as exc:
            handler.handle(ClearanceSaleSetup(discount_amount=Decimal("5")), VENDOR)
        assert exc.value.code == "MISSING_FIELD"
        assert sale_repo.saves == 0

    def test_date_range_checked(self):
        handler, sale_repo, _ = _setup()
        with pytest.raises(ValidationError) as exc:
            handler.handle(_setup_dto(expireDate="2026-02-01T00:00:00Z"), VENDOR)
        assert exc.value.code == "INVALID_DATE_RANGE"
        assert sale_repo.get_by_vendor("v1") is None

    def test_specific_time_window_checked(self):
        handler, _, _ = _setup()
        with pytest.raises(ValidationError) as exc:
            handler.handle(
                _setup_dto(offerActiveTime="specific_time", startTime="25:00", endTime="10:00"),
                VENDOR,
            )
        assert exc.value.code == "INVALID_TIME_WINDOW"

    def test_unknown_discount_type(self):
        with pytest.raises(ValidationError, match="discountType"):
            _setup_dto(discountType="bogus")


class TestSetupUpdate:

    def test_second_call_updates_same_config(self):
        handler, sale_repo, _ = _setup()
        first = handler.handle(_setup_dto(), VENDOR)
        second = handler.handle(ClearanceSaleSetup(discount_amount=Decimal("30")), VENDOR)
        assert second.id == first.id
        assert second.discount_amount == Decimal("30")
        assert second.meta_title == "March clearance"
        assert second.version == first.version + 1

    def test_update_keeps_membership(self):
        handler, sale_repo, _ = _setup()
        handler.handle(_setup_dto(), VENDOR)
        sale_repo.add_products("v1", ["p1", "p2"])
        updated = handler.handle(ClearanceSaleSetup(meta_title="New"), VENDOR)
        assert [p.product_id for p in updated.products] == ["p1", "p2"]

    def test_update_revalidates_merged_config(self):
        handler, _, _ = _setup()
        handler.handle(_setup_dto(), VENDOR)
        with pytest.raises(ValidationError) as exc:
            handler.handle(
                ClearanceSaleSetup.from_payload({"expireDate": "2026-02-01T00:00:00Z"}), VENDOR
            )
        assert exc.value.code == "INVALID_DATE_RANGE"

    def test_switch_to_specific_time(self):
        handler, _, _ = _setup()
        handler.handle(_setup_dto(), VENDOR)
        updated = handler.handle(
            _setup_dto(offerActiveTime="specific_time", startTime="09:00", endTime="18:00"),
            VENDOR,
        )
        assert updated.offer_active_time is OfferActiveTime.SPECIFIC_TIME

    def test_owners_are_independent(self):
        handler, sale_repo, _ = _setup()
        vendor = handler.handle(_setup_dto(), VENDOR)
        admin = handler.handle(_setup_dto(), ADMIN)
        assert vendor.id != admin.id

    def test_vendor_named_admin_gets_own_config(self):
        handler, sale_repo, _ = _setup()
        global_sale = handler.handle(_setup_dto(), ADMIN)
        vendor_sale = handler.handle(
            _setup_dto(discountAmount=40), Actor.vendor("admin")
        )
        assert vendor_sale.id != global_sale.id
        assert vendor_sale.vendor_id == "admin"
        assert sale_repo.get_by_vendor(None).discount_amount == Decimal("15")

    def test_cache_cleared(self):
        handler, _, cache = _setup()
        cache.set("clearance:public", "stale")
        handler.handle(_setup_dto(), VENDOR)
        assert cache.get("clearance:public") is None


class TestShowAndToggle:

    def test_show_missing_returns_none(self):
        assert ShowClearanceSaleHandler(FakeClearanceSaleRepository()).handle(VENDOR) is None

    def test_toggle(self):
        handler, sale_repo, cache = _setup()
        handler.handle(_setup_dto(), VENDOR)
        sale_repo.add_products("v1", ["p1"])
        toggle = ToggleClearanceSaleHandler(sale_repo, CacheInvalidator(cache), fixed_clock())
        config = toggle.handle(VENDOR, True)
        assert config.is_active is True
        assert [p.product_id for p in config.products] == ["p1"]
        assert ShowClearanceSaleHandler(sale_repo).handle(VENDOR).is_active is True

    def test_toggle_without_config(self):
        toggle = ToggleClearanceSaleHandler(
            FakeClearanceSaleRepository(), CacheInvalidator(InMemoryCache())
        )
        with pytest.raises(EntityNotFoundError) as exc:
            toggle.handle(VENDOR, True)
        assert exc.value.code == "SALE_NOT_FOUND"


class _RacingSaleRepository(FakeClearanceSaleRepository):
    """Runs ``race`` once, right after the next read, before the caller saves."""

    def __init__(self, race):
        super().__init__()
        self._race = race

    def get_by_vendor(self, vendor_id):
        config = super().get_by_vendor(vendor_id)
        race, self._race = self._race, None
        if race is not None and config is not None:
            race(self)
        return config


class TestConcurrentConfigWrites:

    def test_toggle_does_not_overwrite_concurrent_setup(self):
        def concurrent_setup(repo):
            SetupClearanceSaleHandler(repo, CacheInvalidator(InMemoryCache())).handle(
                ClearanceSaleSetup(discount_amount=Decimal("50")), VENDOR
            )

        sale_repo = _RacingSaleRepository(race=None)
        cache = CacheInvalidator(InMemoryCache())
        SetupClearanceSaleHandler(sale_repo, cache, fixed_clock()).handle(_setup_dto(), VENDOR)
        sale_repo._race = concurrent_setup

        toggle = ToggleClearanceSaleHandler(sale_repo, cache, fixed_clock())
        with pytest.raises(ConflictError) as exc:
            toggle.handle(VENDOR, True)

        assert exc.value.code == "VERSION_CONFLICT"
        stored = sale_repo.get_by_vendor("v1")
        assert stored.discount_amount == Decimal("50")
        assert stored.is_active is False

    def test_setup_does_not_overwrite_concurrent_toggle(self):
        def concurrent_toggle(repo):
            ToggleClearanceSaleHandler(repo, CacheInvalidator(InMemoryCache())).handle(
                VENDOR, True
            )

        sale_repo = _RacingSaleRepository(race=None)
        cache = CacheInvalidator(InMemoryCache())
        handler = SetupClearanceSaleHandler(sale_repo, cache, fixed_clock())
        handler.handle(_setup_dto(), VENDOR)
        sale_repo._race = concurrent_toggle

        with pytest.raises(ConflictError):
            handler.handle(ClearanceSaleSetup(meta_title="Late edit"), VENDOR)

        stored = sale_repo.get_by_vendor("v1")
        assert stored.is_active is True
        assert stored.meta_title == "March clearance"
