"""Domain protocols shared by the services and the storage backends."""
