# storefront/main.py
import uvicorn

from storefront.api import create_app
from storefront.repos import build_storage
from storefront.utils.settings import StorageConfig

app = create_app(build_storage(StorageConfig.from_env()))

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
