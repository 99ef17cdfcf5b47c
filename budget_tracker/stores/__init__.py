from importlib import import_module


def get_store(config):
    """Instantiate the store backend named by ``config['store']['backend']``."""
    backend = config.get('store', {}).get('backend', 'memory')
    try:
        store_path = config['store_backends'][backend]
    except KeyError:
        raise ValueError(f"Unknown store backend: {backend}") from None
    module_name, cls_name = store_path.rsplit('.', 1)
    mod = import_module(module_name)
    return getattr(mod, cls_name)(config)
