from .resources.social.publish_resource import blp_publish


def register_publish_routes(app, api):
    api.register_blueprint(blp_publish, url_prefix="/api")
