from activations.infrastructure.models import DeviceActivation  # noqa: F401
