"""OTP Auth Service: phone number login with one-time codes."""

__version__ = "1.0.0"
