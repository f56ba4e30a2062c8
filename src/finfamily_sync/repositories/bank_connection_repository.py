"""BankConnectionRepository for provider connections and their sync status."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from finfamily_sync.models.bank_connection import BankConnection

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"
STATUS_PENDING = "pending"


class BankConnectionNotFoundError(Exception):
    """Raised when a bank connection is not found."""

    pass


class BankConnectionRepository:
    """Repository for bank connection reads and status writes."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy database session.
        """
        self._session = session

    def create(
        self,
        user_id: str,
        provider: str,
        encrypted_credentials: str | None = None,
        auto_sync: bool = False,
    ) -> BankConnection:
        """Create a new connection in ``pending`` status.

        Returns:
            The created BankConnection.
        """
        connection = BankConnection(
            user_id=user_id,
            provider=provider,
            encrypted_credentials=encrypted_credentials,
            auto_sync=auto_sync,
            status=STATUS_PENDING,
        )
        self._session.add(connection)
        self._session.flush()
        return connection

    def find(self, user_id: str, provider: str) -> BankConnection | None:
        """Find the connection for a (user, provider) pair."""
        stmt = select(BankConnection).where(
            BankConnection.user_id == user_id,
            BankConnection.provider == provider,
        )
        return self._session.execute(stmt).scalar_one_or_none()

    def get(self, user_id: str, provider: str) -> BankConnection:
        """Get the connection for a (user, provider) pair.

        Raises:
            BankConnectionNotFoundError: If there is none.
        """
        connection = self.find(user_id, provider)
        if connection is None:
            raise BankConnectionNotFoundError(
                f"No {provider} connection for user {user_id}"
            )
        return connection

    def get_auto_sync(self) -> list[BankConnection]:
        """Get connections eligible for scheduled sync.

        Returns:
            Connections with auto_sync on and stored credentials, by id.
        """
        stmt = (
            select(BankConnection)
            .where(
                BankConnection.auto_sync == True,  # noqa: E712
                BankConnection.encrypted_credentials.is_not(None),
            )
            .order_by(BankConnection.id)
        )
        return list(self._session.execute(stmt).scalars().all())

    def upsert_status(
        self,
        user_id: str,
        provider: str,
        status: str,
        last_sync: datetime,
        accounts_count: int | None = None,
        error_message: str | None = None,
    ) -> BankConnection:
        """Record the outcome of a sync attempt, creating the row if needed.

        A success clears any previous error message.

        Returns:
            The updated BankConnection.
        """
        connection = self.find(user_id, provider)
        if connection is None:
            connection = BankConnection(user_id=user_id, provider=provider)
            self._session.add(connection)

        connection.status = status
        connection.last_sync = last_sync
        if status == STATUS_SUCCESS:
            connection.accounts_count = accounts_count
            connection.error_message = None
        else:
            connection.error_message = error_message

        self._session.flush()
        return connection
