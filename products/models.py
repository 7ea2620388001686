from products.infrastructure.models import FileAsset, Policy, Product, ProductFile  # noqa: F401
