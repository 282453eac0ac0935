"""
Password policy for dashboard accounts.

Applied when an admin creates an account or sets a new password. The
critical users from the build take their passwords from the environment
and are not checked here.
"""

import re


class PasswordValidator:
    """Length limits plus one rule per required character class"""

    MIN_LENGTH = 8
    MAX_LENGTH = 128

    # (pattern, error fragment, requirement shown under the form field)
    CHARACTER_RULES = (
        (re.compile(r'[A-Z]'), "one uppercase letter", "At least one uppercase letter (A-Z)"),
        (re.compile(r'[a-z]'), "one lowercase letter", "At least one lowercase letter (a-z)"),
        (re.compile(r'\d'), "one digit", "At least one digit (0-9)"),
    )

    @classmethod
    def validate(cls, password, username=None):
        """
        Check ``password`` against the policy.

        Args:
            password (str): Candidate password
            username (str, optional): Account name the password may not contain

        Returns:
            tuple: (is_valid, error_message)
        """
        if not password:
            return False, "Password is required"

        if len(password) < cls.MIN_LENGTH:
            return False, f"Password must be at least {cls.MIN_LENGTH} characters"
        if len(password) > cls.MAX_LENGTH:
            return False, f"Password must be less than {cls.MAX_LENGTH} characters"

        for pattern, fragment, _ in cls.CHARACTER_RULES:
            if not pattern.search(password):
                return False, f"Password must contain at least {fragment}"

        if username and len(username) >= 3 and username.lower() in password.lower():
            return False, "Password must not contain the username"

        return True, ""

    @classmethod
    def get_requirements_text(cls):
        requirements = [f"At least {cls.MIN_LENGTH} characters long"]
        requirements.extend(requirement for _, _, requirement in cls.CHARACTER_RULES)
        requirements.append("Must not contain the username")
        return "Password must contain: " + ", ".join(requirements)
