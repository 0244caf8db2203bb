from flask import current_app

from config import COLLECTION_NAME, USERS_COLLECTION


def get_db():
    return current_app.extensions["mongo_db"]


def get_cache():
    return current_app.extensions["cache"]


def get_recommender():
    return current_app.extensions["recommender"]


def users_col():
    return get_db()[USERS_COLLECTION]


def internships_col():
    return get_db()[COLLECTION_NAME]
