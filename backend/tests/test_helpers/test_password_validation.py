"""
Unit tests for password validation helper.
"""

from helpers.password_validation import PasswordRequirements, validate_password


class TestValidatePassword:
    """Tests for the default policy: minimum length only."""

    def test_valid_password(self):
        is_valid, errors = validate_password("secret1")
        assert is_valid is True
        assert errors == []

    def test_letters_only_is_enough(self):
        """The default policy does not demand character classes."""
        is_valid, _ = validate_password("abcdef")
        assert is_valid is True

    def test_too_short(self):
        is_valid, errors = validate_password("abc")
        assert is_valid is False
        assert "Password must be at least 6 characters long" in errors

    def test_blank_password_rejected(self):
        is_valid, errors = validate_password("        ")
        assert is_valid is False
        assert "Password must not be blank" in errors

    def test_over_bcrypt_limit(self):
        """bcrypt only looks at the first 72 bytes."""
        is_valid, errors = validate_password("é" * 40)
        assert is_valid is False
        assert any("72 bytes" in e for e in errors)


class TestCustomRequirements:
    def test_require_digit(self):
        requirements = PasswordRequirements(min_length=4, require_digit=True)
        assert validate_password("abcd", requirements)[0] is False
        assert validate_password("abc1", requirements)[0] is True

    def test_require_letter(self):
        requirements = PasswordRequirements(min_length=4, require_letter=True)
        is_valid, errors = validate_password("12345", requirements)
        assert is_valid is False
        assert errors == ["Password must contain at least one letter"]

    def test_collects_every_error(self):
        requirements = PasswordRequirements(
            min_length=10, require_letter=True, require_digit=True
        )
        is_valid, errors = validate_password("   ", requirements)
        assert is_valid is False
        assert len(errors) == 4
