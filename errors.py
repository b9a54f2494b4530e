class ProfileError(Exception):
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(ProfileError):
    status_code = 400


class InvalidCredentialsError(ProfileError):
    status_code = 401


class NotFoundError(ProfileError):
    status_code = 404


class UserNotFoundError(NotFoundError):
    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class ItemNotFoundError(NotFoundError):
    pass


class ConflictError(ProfileError):
    status_code = 409
