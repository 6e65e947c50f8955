class ActionFailure(Exception):
    """Raised by an apply handler when its action cannot be carried out.

    The executor turns it into the failing action's error message; it never
    propagates past the action boundary.
    """

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class FolderNotFound(ActionFailure):
    def __init__(self, folder_path: str, segment: str):
        self.folder_path = folder_path
        self.segment = segment
        super().__init__(
            f'Folder "{folder_path}" not found (no folder named "{segment}")'
        )
