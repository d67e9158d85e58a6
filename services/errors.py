# services/errors.py


class TodoError(Exception):
    """サービス層の例外の基底クラス"""


class TaskNotFoundError(TodoError):
    pass


class NotTaskOwnerError(TodoError):
    """他のユーザーのタスクを操作しようとした"""


class EmailAlreadyRegisteredError(TodoError):
    pass


class InvalidCredentialsError(TodoError):
    pass


class StoreError(TodoError):
    """DB への書き込みに失敗した"""
