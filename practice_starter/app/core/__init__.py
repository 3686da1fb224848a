"""Core services shared by the API and the pages.

Attributes:
    config: Settings loaded from the environment.
    security: Password hashing and JWT creation.
    auth: Dependencies resolving the current user.
    errors: Application exceptions and their HTTP mapping.
    email: Verification e-mail delivery.

"""
