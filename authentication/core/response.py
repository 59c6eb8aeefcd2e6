def standardized_response(success=True, data=None, message=None, error=None, error_code=None, **extra):
    """Uniform JSON envelope returned by every API view."""
    response = {
        "success": success,
        "message": message,
        "data": data,
        "error": error,
    }
    if error_code is not None:
        response["error_code"] = error_code
    response.update(extra)
    return response


def first_error_message(errors):
    """Flatten DRF serializer errors down to the first human-readable message."""
    if isinstance(errors, dict):
        for value in errors.values():
            return first_error_message(value)
    if isinstance(errors, (list, tuple)) and errors:
        return first_error_message(errors[0])
    return str(errors)
