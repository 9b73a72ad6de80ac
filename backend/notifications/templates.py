VERIFICATION_SUBJECT = "Verify your email"
VERIFICATION_TEMPLATE = """Hello,

Thank you for signing up. Your verification code is:

    {code}

Enter this code on the verification page to complete your registration.
The code expires in 24 hours.

If you did not create an account, you can ignore this email.
"""

WELCOME_SUBJECT = "Welcome!"
WELCOME_TEMPLATE = """Hello {name},

Your email has been verified and your account is ready to use.
"""

PASSWORD_RESET_SUBJECT = "Reset your password"
PASSWORD_RESET_TEMPLATE = """Hello,

We received a request to reset your password. Follow the link below to choose
a new one:

    {reset_url}

The link expires in 1 hour. If you did not ask for a reset, ignore this email.
"""

RESET_SUCCESS_SUBJECT = "Password reset successful"
RESET_SUCCESS_TEMPLATE = """Hello,

Your password has been reset. If you did not make this change, contact support
immediately.
"""
