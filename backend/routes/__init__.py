from .items import items_bp

def register_routes(app):
    app.register_blueprint(items_bp, url_prefix='/api/items')
