"""Web application package for practice-starter.

It exposes the FastAPI application factory, the REST API for users and
authentication, and the server-rendered pages.

Modules:
    main: Application factory and top level wiring.
    middleware: Sliding session refresh for cookie based logins.
    core: Configuration, security, authentication, error handling and e-mail.
    database: Engine and session management.
    models: SQLAlchemy models.
    schemas: Pydantic request and response models.
    api: REST routers and their route logic.
    web: Jinja2 rendered pages.

"""
