import importlib

mod = "json2cpp"
class LazyLoader:
    """
    Lazy loader for the json2cpp functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the functions and their corresponding module paths
_mappings = {
    "convert_json_to_cpp": (f"{mod}.jsontocpp", "convert_json_to_cpp"),
    "convert_json_to_schema": (f"{mod}.jsontocpp", "convert_json_to_schema"),
    "infer_schema": (f"{mod}.schema_inference", "infer_schema"),
    "fold_schemas": (f"{mod}.schema_merge", "fold_schemas"),
    "sort_structs_by_dependencies": (f"{mod}.dependency_resolver", "sort_structs_by_dependencies"),
    "get_generator": (f"{mod}.schematocpp", "get_generator"),
    "sanitize": (f"{mod}.nameutil", "sanitize"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
