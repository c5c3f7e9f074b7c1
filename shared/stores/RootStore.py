from shared.clients.api.ApiClientInterface import ApiClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.stores.CollectionsStore import CollectionsStore
from shared.stores.DocumentsStore import DocumentsStore
from shared.stores.UiStore import UiStore


class RootStore:
    """
    Owns all stores sharing one api client, so stores can resolve each other's entities.
    """

    def __init__(self, helper_config: HelperConfig, client: ApiClientInterface):
        self.logging = helper_config.get_logger()
        self.client = client
        self.ui = UiStore()
        self.collections = CollectionsStore(helper_config=helper_config, client=client)
        self.documents = DocumentsStore(helper_config=helper_config, client=client, root_store=self)
