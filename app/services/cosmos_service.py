import logging

from azure.cosmos import CosmosClient, PartitionKey

logger = logging.getLogger(__name__)

# Items are partitioned on their own id
PARTITION_KEY_PATH = "/id"


class CosmosDbService:
    """
    Handle on one Cosmos DB container.
    - owns the CosmosClient for the lifetime of the process
    - database / container are provisioned with ensure_* (create if absent)
    """

    def __init__(self, client: CosmosClient, database_name: str, container_name: str):
        self.client = client
        self.database_name = database_name
        self.container_name = container_name
        self._database = None
        self._container = None

    # -------------------------
    # Provisioning
    # -------------------------
    def ensure_database(self):
        self._database = self.client.create_database_if_not_exists(id=self.database_name)
        logger.info("Database ensured", extra={"props": {"database": self.database_name}})
        return self._database

    def ensure_container(self):
        if self._database is None:
            self.ensure_database()
        self._container = self._database.create_container_if_not_exists(
            id=self.container_name,
            partition_key=PartitionKey(path=PARTITION_KEY_PATH),
        )
        logger.info(
            "Container ensured",
            extra={
                "props": {
                    "database": self.database_name,
                    "container": self.container_name,
                    "partition_key": PARTITION_KEY_PATH,
                }
            },
        )
        return self._container

    # -------------------------
    # Access
    # -------------------------
    @property
    def container(self):
        if self._container is None:
            self._container = (
                self.client
                .get_database_client(self.database_name)
                .get_container_client(self.container_name)
            )
        return self._container

    def close(self) -> None:
        self.client.close()
