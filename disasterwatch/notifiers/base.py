from ..fetchers.base import Update


class Notifier:
    """Delivers one Update somewhere. notify() reports success and never raises."""

    name: str = "base"

    def notify(self, update: Update) -> bool:
        raise NotImplementedError
