from roomspace.databases.mongodb import mongodb

__all__ = ["mongodb"]
