from models.session_model import ExportMenuState


class ExportMenu:
    """closed -> open on toggle; open -> closed on selection, dismissal or completion."""

    def __init__(self):
        self.state = ExportMenuState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.state is ExportMenuState.OPEN

    def toggle(self) -> ExportMenuState:
        self.state = ExportMenuState.CLOSED if self.is_open else ExportMenuState.OPEN
        return self.state

    def close(self) -> ExportMenuState:
        self.state = ExportMenuState.CLOSED
        return self.state
