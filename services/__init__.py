from flask import current_app


def get_booking_engine():
    return current_app.extensions["booking_engine"]


def get_notifier():
    return current_app.extensions["notifier"]
