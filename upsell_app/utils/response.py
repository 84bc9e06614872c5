from flask import jsonify


def success_response(message="Success", code=200):
    return jsonify({"success": message}), code


def error_response(message="An error occurred", code=400):
    return jsonify({"error": message}), code


def json_response(data, code=200):
    return jsonify(data), code
