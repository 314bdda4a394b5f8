"""
Service for fish lineage (family trees).

Builds the ancestor and descendant graphs of a fish from the `parent1_id` /
`parent2_id` pointers in the fish table. The data is expected to form a
shallow DAG but nothing enforces that, so both walks:

- keep an explicit visited set, so a cycle or self-reference cannot loop;
- stop with `LineageDepthError` past LINEAGE_MAX_DEPTH generations instead of
  returning a truncated tree that looks complete.

Only the off-chain store is read.
"""

from typing import List, Optional, Set, Tuple

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.errors import LineageDepthError, NotFoundError, ValidationError
from ..core.logging_config import get_logger
from ..models.fish import Fish
from ..schemas.fish import FamilyTree, FamilyTreeNode

logger = get_logger(__name__)


def _to_node(fish: Fish, generation: int) -> FamilyTreeNode:
    return FamilyTreeNode(
        id=fish.id,
        generation=generation,
        parent1_id=fish.parent1_id,
        parent2_id=fish.parent2_id,
        species=fish.species,
        owner=fish.owner,
    )


class LineageService:
    """Service for building fish family trees."""

    @staticmethod
    async def build_family_tree(
        db: AsyncSession, root_id: int, max_depth: Optional[int] = None
    ) -> FamilyTree:
        """
        Ancestors and descendants of a fish.

        Args:
            db: Database session
            root_id: Fish to build the tree around
            max_depth: Generation cap for each walk, defaults to LINEAGE_MAX_DEPTH

        Returns:
            FamilyTree with the root at generation 0 in `ancestors`

        Raises:
            ValidationError: root_id is not a positive integer
            NotFoundError: Root fish does not exist
            LineageDepthError: A walk went past the generation cap
        """
        if not isinstance(root_id, int) or isinstance(root_id, bool) or root_id <= 0:
            raise ValidationError("Invalid fish ID")
        if max_depth is None:
            max_depth = settings.LINEAGE_MAX_DEPTH

        root = await LineageService._get_fish(db, root_id)
        if root is None:
            raise NotFoundError(f"Fish with ID {root_id} not found")

        ancestors = await LineageService._walk_ancestors(db, root, max_depth)
        descendants, descendant_generations = await LineageService._walk_descendants(
            db, root.id, max_depth
        )

        return FamilyTree(
            fish_id=root.id,
            ancestors=ancestors,
            descendants=descendants,
            ancestor_generation_count=max(node.generation for node in ancestors),
            descendant_generation_count=descendant_generations,
        )

    @staticmethod
    async def _walk_ancestors(
        db: AsyncSession, root: Fish, max_depth: int
    ) -> List[FamilyTreeNode]:
        visited: Set[int] = {root.id}
        ancestors = [_to_node(root, 0)]
        stack: List[Tuple[Fish, int]] = [(root, 0)]

        while stack:
            fish, generation = stack.pop()
            for parent_id in (fish.parent1_id, fish.parent2_id):
                if parent_id is None or parent_id in visited:
                    continue
                if generation + 1 > max_depth:
                    logger.error(
                        "Ancestor walk exceeded maximum depth",
                        extra={"root_id": root.id, "fish_id": fish.id, "max_depth": max_depth},
                    )
                    raise LineageDepthError(
                        f"Ancestry of fish {root.id} exceeds {max_depth} generations"
                    )
                visited.add(parent_id)

                parent = await LineageService._get_fish(db, parent_id)
                if parent is None:
                    logger.debug(
                        "Dangling parent pointer skipped",
                        extra={"fish_id": fish.id, "parent_id": parent_id},
                    )
                    continue

                ancestors.append(_to_node(parent, generation + 1))
                stack.append((parent, generation + 1))

        return ancestors

    @staticmethod
    async def _walk_descendants(
        db: AsyncSession, root_id: int, max_depth: int
    ) -> Tuple[List[FamilyTreeNode], int]:
        visited: Set[int] = {root_id}
        descendants: List[FamilyTreeNode] = []
        level = [root_id]
        generation = 0

        while level:
            result = await db.execute(
                select(Fish)
                .where(or_(Fish.parent1_id.in_(level), Fish.parent2_id.in_(level)))
                .order_by(Fish.id)
            )
            children = [child for child in result.scalars().all() if child.id not in visited]
            if not children:
                break

            generation += 1
            if generation > max_depth:
                logger.error(
                    "Descendant walk exceeded maximum depth",
                    extra={"root_id": root_id, "max_depth": max_depth},
                )
                raise LineageDepthError(
                    f"Descendants of fish {root_id} exceed {max_depth} generations"
                )

            level = []
            for child in children:
                visited.add(child.id)
                descendants.append(_to_node(child, generation))
                level.append(child.id)

        return descendants, generation

    @staticmethod
    async def _get_fish(db: AsyncSession, fish_id: int) -> Optional[Fish]:
        result = await db.execute(select(Fish).where(Fish.id == fish_id))
        return result.scalar_one_or_none()
