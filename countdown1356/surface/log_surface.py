from countdown1356.constants.constants import DisplayText
from countdown1356.core.snapshot import CountdownSnapshot
from countdown1356.display.formatting import format_surface_text
from countdown1356.surface.base_surface import BaseSurface


class LogSurface(BaseSurface):
    """
    Dòng trạng thái cho chế độ CLI: ghi văn bản trạng thái vào log.
    """

    def __init__(self, title: str = "", in_progress_text: str = DisplayText.IN_PROGRESS):
        super().__init__()
        self.title = title
        self.in_progress_text = in_progress_text
        self.last_text = ""

    async def update_surface(self, snapshot: CountdownSnapshot):
        text = format_surface_text(snapshot, self.in_progress_text)
        self.last_text = text
        if self.title:
            self.logger.info(f"{self.title}: {text}")
        else:
            self.logger.info(text)
