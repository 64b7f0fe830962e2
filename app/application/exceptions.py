class BookingError(RuntimeError):
    """Base class for failures around booking status updates."""

    message_ja = "エラーが発生しました。後でもう一度お試しください。"


class BookingNotFoundError(BookingError):
    """Raised when no booking matches the requested id."""

    message_ja = "予約が見つかりません"


class InvalidTransitionError(BookingError):
    """Raised when a side status change is not allowed from its current value."""

    message_ja = "この予約ステータスには変更できません"


class ActorNotAllowedError(BookingError):
    """Raised when an actor tries to write a status column it does not own."""

    message_ja = "この操作を行う権限がありません"


class StatusConflictError(BookingError):
    """Raised when the status column changed between read and write."""

    message_ja = "予約が他のユーザーによって更新されました。再読み込みしてください。"


class BookingStoreError(BookingError):
    """Raised when the backing store fails (network, permissions, bad payload)."""

    message_ja = "予約データの取得に失敗しました"
