class UiStore:
    """Selection state of whoever presents the documents."""

    def __init__(self) -> None:
        self.active_document_id: str | None = None

    def set_active_document(self, document_id: str) -> None:
        self.active_document_id = document_id

    def clear_active_document(self) -> None:
        self.active_document_id = None
