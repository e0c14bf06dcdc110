import importlib

mod = "orva"
class LazyLoader:
    """
    Lazy loader for the orva functions so that importing the package stays cheap.
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
            module_name, attr_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, attr_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the public names and their corresponding module paths
_mappings = {
    "get_schema": (f"{mod}.typetoavro", "get_schema"),
    "get_schema_fragment": (f"{mod}.typetoavro", "get_schema_fragment"),
    "type_name_and_namespace": (f"{mod}.typetoavro", "type_name_and_namespace"),
    "convert_type_to_avro_schema": (f"{mod}.typetoavro", "convert_type_to_avro_schema"),
    "AvroSchemaError": (f"{mod}.typetoavro", "AvroSchemaError"),
    "SchemaNotSupportedError": (f"{mod}.typetoavro", "SchemaNotSupportedError"),
    "SchemaNotImplementedError": (f"{mod}.typetoavro", "SchemaNotImplementedError"),
    "TypeInfo": (f"{mod}.typeinfo", "TypeInfo"),
    "Int32": (f"{mod}.markers", "Int32"),
    "Int64": (f"{mod}.markers", "Int64"),
    "Float32": (f"{mod}.markers", "Float32"),
    "Float64": (f"{mod}.markers", "Float64"),
    "Byte": (f"{mod}.markers", "Byte"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
