"""CategoryRepository for the static category table."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from finfamily_sync.models.category import Category


class CategoryNotFoundError(Exception):
    """Raised when a category is not found."""

    pass


class CategoryRepository:
    """Repository for category reads and seeding."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy database session.
        """
        self._session = session

    def get(self, category_id: int) -> Category:
        """Get a category by ID.

        Raises:
            CategoryNotFoundError: If category doesn't exist.
        """
        category = self._session.get(Category, category_id)
        if category is None:
            raise CategoryNotFoundError(f"Category {category_id} not found")
        return category

    def get_all(self) -> list[Category]:
        """Get all categories ordered by id."""
        stmt = select(Category).order_by(Category.id)
        return list(self._session.execute(stmt).scalars().all())

    def ensure(
        self, category_id: int, name: str, description: str | None = None
    ) -> tuple[Category, bool]:
        """Create a category with a fixed id unless it already exists.

        An existing row keeps its id; its name is brought in line.

        Returns:
            Tuple of (category, created).
        """
        category = self._session.get(Category, category_id)
        if category is not None:
            category.name = name
            if description is not None:
                category.description = description
            self._session.flush()
            return category, False

        category = Category(id=category_id, name=name, description=description)
        self._session.add(category)
        self._session.flush()
        return category, True
