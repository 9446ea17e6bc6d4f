"""
Overlay asset lookup

Overlays live in a flat asset directory and are looked up by a chain of
naming conventions; the first asset that exists and decodes wins.
"""
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from PIL import Image

from possessao.utils.config import settings
from possessao.utils.logger import get_logger

logger = get_logger(__name__)

NamingStrategy = Callable[[str, str], str]

NAMING_STRATEGIES: Sequence[NamingStrategy] = (
    lambda entity_id, orientation: f"{entity_id}_{orientation}.png",
    lambda entity_id, orientation: f"{entity_id}{orientation}.png",
    lambda entity_id, orientation: f"default_{orientation}.png",
    lambda entity_id, orientation: f"default{orientation}.png",
)


class OverlayLoader:
    """Resolve and decode the overlay for an entity and camera orientation"""

    def __init__(
        self,
        base_dir: Optional[Union[str, Path]] = None,
        strategies: Sequence[NamingStrategy] = NAMING_STRATEGIES
    ):
        self.base_dir = Path(base_dir) if base_dir is not None else settings.overlay_path
        self.strategies = list(strategies)

    def candidate_names(self, entity_id: str, orientation: str) -> List[str]:
        """File names to try, in priority order"""
        return [strategy(entity_id, orientation) for strategy in self.strategies]

    def load(self, entity_id: str, orientation: str) -> Optional[Image.Image]:
        """
        Load the first matching overlay

        Args:
            entity_id: Entity identifier (e.g. "legiao")
            orientation: Camera orientation ("frontal" or "traseira")

        Returns:
            Decoded RGBA overlay, or None when no asset is usable
        """
        for file_name in self.candidate_names(entity_id, orientation):
            path = self.base_dir / file_name
            if not path.is_file():
                continue
            try:
                with Image.open(path) as img:
                    overlay = img.convert("RGBA")
                logger.info(f"Overlay found: {file_name}")
                return overlay
            except (OSError, ValueError) as e:
                logger.warning(f"Overlay {file_name} could not be decoded: {e}")

        logger.warning(f"No overlay found for: {entity_id} + {orientation}")
        return None
