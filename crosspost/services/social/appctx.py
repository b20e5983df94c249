from flask import Flask

_app = None


def get_app() -> Flask:
    global _app
    if _app is None:
        from crosspost import create_publish_app  # local import prevents circular import
        _app = create_publish_app()
    return _app


def run_in_app_context(fn, *args, **kwargs):
    app = get_app()
    with app.app_context():
        return fn(*args, **kwargs)
