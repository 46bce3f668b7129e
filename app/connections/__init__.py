from app.connections.mongo import close_mongo, init_mongo, mongo_connection

__all__ = ["close_mongo", "init_mongo", "mongo_connection"]
