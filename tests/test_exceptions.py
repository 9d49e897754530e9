"""Tests for custom exception hierarchy."""

from microfinance.exceptions import (
    ConfigurationError,
    EntityNotFoundError,
    InvalidEntityStateError,
    InvalidPeriodRangeError,
    MicrofinanceError,
    ReferentialIntegrityError,
    SinkError,
    UnsupportedVariantError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_microfinance_error_is_exception(self) -> None:
        assert isinstance(MicrofinanceError("test"), Exception)

    def test_unsupported_variant_is_microfinance_error(self) -> None:
        assert isinstance(UnsupportedVariantError("test"), MicrofinanceError)

    def test_invalid_period_range_is_microfinance_error(self) -> None:
        assert isinstance(InvalidPeriodRangeError("test"), MicrofinanceError)

    def test_entity_not_found_is_microfinance_error(self) -> None:
        assert isinstance(EntityNotFoundError("test"), MicrofinanceError)

    def test_referential_integrity_is_entity_not_found(self) -> None:
        err = ReferentialIntegrityError("test")
        assert isinstance(err, EntityNotFoundError)
        assert isinstance(err, MicrofinanceError)

    def test_invalid_entity_state_is_microfinance_error(self) -> None:
        assert isinstance(InvalidEntityStateError("test"), MicrofinanceError)

    def test_configuration_error_is_microfinance_error(self) -> None:
        assert isinstance(ConfigurationError("test"), MicrofinanceError)

    def test_sink_error_is_microfinance_error(self) -> None:
        assert isinstance(SinkError("test"), MicrofinanceError)

    def test_exception_message(self) -> None:
        err = ReferentialIntegrityError("Loan loan-001 not found")
        assert str(err) == "Loan loan-001 not found"
