def RestController(base_path: str = ""):
    """
    Mark a class as a REST controller mounted at base_path.

    Routes come from methods decorated with GetMapping, PostMapping, etc.
    """

    def decorator(cls):
        cls.__usersapi_base_path__ = base_path
        return cls

    return decorator
