import pytest

from src.print_tracker.print_tracker.core.exceptions import ValidationError
from src.print_tracker.print_tracker.users.password_policy import password_errors, require_strong_password


def test_strong_password_passes():
    assert password_errors("Str0ng#Pass") == []
    assert require_strong_password("Str0ng#Pass") == "Str0ng#Pass"


@pytest.mark.parametrize(
    "password, fragment",
    [
        ("Sh0#t", "at least 8"),
        ("alllower1#", "uppercase"),
        ("ALLUPPER1#", "lowercase"),
        ("NoDigits#!", "number"),
        ("NoSpecial12", "special"),
        ("A1#" + "a" * 130, "exceed 128"),
    ],
)
def test_each_rule_is_reported(password, fragment):
    assert any(fragment in e for e in password_errors(password))


def test_common_password_rejected_case_insensitively():
    assert any("too common" in e for e in password_errors("PASSWORD123"))


def test_require_strong_password_carries_every_error():
    with pytest.raises(ValidationError) as exc_info:
        require_strong_password("abc", "new_password")

    assert exc_info.value.field == "new_password"
    assert len(exc_info.value.details["errors"]) >= 3
