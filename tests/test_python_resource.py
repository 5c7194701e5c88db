"""
Tests for scripting resource values (pyembed.scripting.python_resource).
"""

import copy

import pytest

from pyembed.resource import (
    BytecodeModule,
    BytecodeOptimizationLevel,
    ExtensionModule,
    ExtensionModuleData,
    ExtensionModuleDynamicLibrary,
    ExtensionModuleStaticallyLinked,
    ModuleBytecode,
    ModuleBytecodeRequest,
    ModuleSource,
    Resource,
    ResourceData,
    SourceModule,
)
from pyembed.scripting import (
    BOOL, INT, STRING, SOURCE_MODULE,
    ExtensionModuleKind,
    PythonBytecodeModule,
    PythonExtensionModule,
    PythonExtensionModuleFlavor,
    PythonResourceData,
    PythonSourceModule,
    TypedValue,
    UnsupportedConversion,
    UnsupportedOperation,
    Value,
    default_compare,
    resource_val,
    to_scripting_value,
)


def _source(name="pkg.mod", source=b"", is_package=True):
    return to_scripting_value(ModuleSource(name=name, source=source, is_package=is_package))


def _bytecode(level=0, name="pkg.mod"):
    return to_scripting_value(ModuleBytecodeRequest(
        name=name, source=b"x = 1\n", optimize_level=level, is_package=False))


def _data(package="pkg", name="data.txt"):
    return to_scripting_value(Resource(package=package, name=name, data=b"payload"))


def _extension(name="_speedups", static=False):
    em = ExtensionModuleData(name=name, init_fn=f"PyInit_{name}")
    if static:
        return to_scripting_value(ExtensionModuleStaticallyLinked(em))
    return to_scripting_value(ExtensionModuleDynamicLibrary(em))


def _distribution_extension(module="_ssl"):
    em = ExtensionModule(module=module, init_fn=f"PyInit_{module}", links=())
    return PythonExtensionModule(PythonExtensionModuleFlavor.distribution(em))


ALLOWLISTS = [
    (_source, {"name": STRING, "is_package": BOOL}),
    (_bytecode, {"name": STRING, "optimize_level": INT, "is_package": BOOL}),
    (_data, {"package": STRING, "name": STRING}),
    (_extension, {"name": STRING}),
    (_distribution_extension, {"name": STRING}),
]

_PYTHON_TYPES = {STRING: str, INT: int, BOOL: bool}


# --- Conversion ---

class TestConversion:
    """Test to_scripting_value dispatch."""

    def test_source_module(self):
        """Module source converts to PythonSourceModule."""
        v = _source()
        assert isinstance(v, PythonSourceModule)
        assert v.get_attr("name").data == "pkg.mod"
        assert v.get_attr("is_package").data is True
        assert v.to_str() == "PythonSourceModule<name=pkg.mod>"

    def test_source_module_keeps_source_bytes(self):
        """The wrapped record still carries the source."""
        v = _source(source=b"print('hi')\n")
        assert v.module == SourceModule(name="pkg.mod", source=b"print('hi')\n", is_package=True)

    @pytest.mark.parametrize("level", [0, 1, 2])
    def test_bytecode_levels(self, level):
        """Optimization levels map through the enumeration."""
        v = _bytecode(level)
        assert isinstance(v, PythonBytecodeModule)
        assert v.module.optimize_level is BytecodeOptimizationLevel(level)
        result = v.get_attr("optimize_level")
        assert result.data == level
        assert type(result.data) is int
        assert result.type == INT

    @pytest.mark.parametrize("level", [-1, 3, 10])
    def test_bytecode_invalid_level(self, level):
        """Levels outside 0..2 are rejected."""
        with pytest.raises(ValueError):
            _bytecode(level)

    def test_resource_data(self):
        """Data resources convert to PythonResourceData."""
        v = _data()
        assert isinstance(v, PythonResourceData)
        assert v.data == ResourceData(package="pkg", name="data.txt", data=b"payload")
        assert v.to_str() == "PythonResourceData<package=pkg, name=data.txt>"

    def test_dynamic_extension(self):
        """Shared library extensions are tagged dynamic."""
        v = _extension("_json")
        assert isinstance(v, PythonExtensionModule)
        assert v.em.kind == ExtensionModuleKind.DYNAMIC_LIBRARY
        assert v.get_attr("name").data == "_json"
        assert v.to_str() == "PythonExtensionModule<name=_json>"

    def test_static_extension(self):
        """Statically linkable extensions are tagged static."""
        v = _extension("_json", static=True)
        assert v.em.kind == ExtensionModuleKind.STATICALLY_LINKED
        assert v.get_attr("name").data == "_json"

    def test_distribution_extension_name(self):
        """Distribution extensions take their name from the module field."""
        v = _distribution_extension("_ssl")
        assert v.em.kind == ExtensionModuleKind.DISTRIBUTION
        assert v.get_attr("name").data == "_ssl"
        assert str(v) == "PythonExtensionModule<name=_ssl>"

    def test_compiled_bytecode_not_convertible(self):
        """Already-compiled bytecode raises a recoverable error."""
        resource = ModuleBytecode(name="pkg.mod", bytecode=b"\x00", optimize_level=0)
        with pytest.raises(UnsupportedConversion) as exc_info:
            to_scripting_value(resource)
        assert exc_info.value.resource_type == "ModuleBytecode"
        assert exc_info.value.diagnostic.code == "E402"

    def test_non_resource_not_convertible(self):
        """Arbitrary objects are not resources."""
        with pytest.raises(UnsupportedConversion):
            to_scripting_value("pkg.mod")

    def test_bytecode_display(self):
        """Bytecode display includes the level."""
        assert _bytecode(2).to_str() == "PythonBytecodeModule<name=pkg.mod; level=Two>"
        assert _bytecode(0).to_str() == "PythonBytecodeModule<name=pkg.mod; level=Zero>"


# --- Capabilities ---

class TestAttributes:
    """Test has_attr/get_attr agreement."""

    @pytest.mark.parametrize("factory,allowed", ALLOWLISTS)
    def test_allowed_attributes(self, factory, allowed):
        """Every allowlisted attribute exists and has the declared type."""
        v = factory()
        for name, attr_type in allowed.items():
            assert v.has_attr(name) is True
            result = v.get_attr(name)
            assert isinstance(result, Value)
            assert result.type == attr_type
            assert type(result.data) is _PYTHON_TYPES[attr_type]
        assert v.dir_attr() == list(allowed)

    @pytest.mark.parametrize("factory,allowed", ALLOWLISTS)
    @pytest.mark.parametrize("attribute", ["source", "data", "bytes", "module", "", "NAME"])
    def test_unknown_attributes(self, factory, allowed, attribute):
        """Anything outside the allowlist is absent and raises."""
        if attribute in allowed:
            pytest.skip("attribute is allowlisted for this kind")
        v = factory()
        assert v.has_attr(attribute) is False
        with pytest.raises(UnsupportedOperation) as exc_info:
            v.get_attr(attribute)
        err = exc_info.value
        assert err.op == f".{attribute}"
        assert err.left == v.get_type()
        assert err.right is None

    def test_withheld_source(self):
        """Source bytes are not readable by scripts."""
        v = _source(source=b"secret")
        with pytest.raises(UnsupportedOperation, match=r"\.source"):
            v.get_attr("source")

    def test_kind_names(self):
        """Each wrapped kind reports its own name."""
        assert _source().get_type() == "PythonSourceModule"
        assert _bytecode().get_type() == "PythonBytecodeModule"
        assert _data().get_type() == "PythonResourceData"
        assert _extension().get_type() == "PythonExtensionModule"


class TestTruthiness:
    """Wrapped resources are always truthy."""

    def test_always_true(self):
        for v in (_source(name=""), _bytecode(), _data(package="", name=""),
                  _extension(name=""), _distribution_extension(module="")):
            assert v.to_bool() is True
            assert bool(v) is True

    def test_resource_val_truthy(self):
        """Bound resource values are truthy in the evaluator."""
        value = resource_val(_source(name=""))
        assert value.type is SOURCE_MODULE
        assert value.is_truthy() is True


class TestRepr:
    """Display and representation strings match."""

    @pytest.mark.parametrize("factory", [f for f, _ in ALLOWLISTS])
    def test_repr_equals_str(self, factory):
        v = factory()
        assert v.to_repr() == v.to_str()
        assert repr(v) == str(v)


class TestComparison:
    """Structural equality and ordering."""

    def test_equal_records(self):
        """Identical records compare equal."""
        assert _source() == _source()
        assert _bytecode(1) == _bytecode(1)
        assert _data() == _data()
        assert _extension() == _extension()
        assert default_compare(_source(), _source()) == 0

    def test_differing_records(self):
        """Differing records compare unequal."""
        assert _source(name="a") != _source(name="b")
        assert _source(source=b"a") != _source(source=b"b")
        assert _bytecode(1) != _bytecode(2)
        assert _data(name="a") != _data(name="b")
        assert _extension(static=True) != _extension(static=False)

    def test_ordering(self):
        """Same-kind values order by their fields."""
        assert _source(name="a") < _source(name="b")
        assert _bytecode(2) > _bytecode(0)
        assert default_compare(_source(name="b"), _source(name="a")) == 1

    def test_cross_kind(self):
        """Different kinds are unequal and order by kind name."""
        src = _source()
        bc = _bytecode()
        assert src != bc
        assert bc < src  # PythonBytecodeModule < PythonSourceModule
        assert sorted([src, bc]) == [bc, src]

    def test_comparison_properties(self):
        """Equality is reflexive, symmetric and transitive."""
        a, b, c = _data(), _data(), _data()
        assert a == a
        assert (a == b) and (b == a)
        assert (a == b) and (b == c) and (a == c)

    def test_non_value_comparison(self):
        """Comparing with plain Python objects is never equal."""
        assert (_source() == "PythonSourceModule<name=pkg.mod>") is False
        with pytest.raises(TypeError):
            _source() < 1
        with pytest.raises(UnsupportedOperation):
            _source().compare("x")

    def test_equal_numeric_fields(self):
        """Records equal in Python give equal values."""
        as_int = BytecodeModule(name="m", source=b"", optimize_level=2)
        as_enum = BytecodeModule(name="m", source=b"",
                                 optimize_level=BytecodeOptimizationLevel.TWO)
        assert PythonBytecodeModule(as_int) == PythonBytecodeModule(as_enum)

        as_bool = SourceModule(name="m", source=b"", is_package=True)
        as_one = SourceModule(name="m", source=b"", is_package=1)
        assert as_bool == as_one
        assert PythonSourceModule(as_bool) == PythonSourceModule(as_one)
        assert PythonSourceModule(as_one).get_attr("is_package").data is True

    def test_optional_fields_compare(self):
        """Records with None and bytes in the same field still order."""
        with_data = ExtensionModuleData(name="_x", extension_data=b"\x7fELF")
        without = ExtensionModuleData(name="_x")
        a = to_scripting_value(ExtensionModuleDynamicLibrary(with_data))
        b = to_scripting_value(ExtensionModuleDynamicLibrary(without))
        assert a != b
        assert b < a


class TestUnsupported:
    """Capabilities outside the interface raise UnsupportedOperation."""

    @pytest.mark.parametrize("factory", [f for f, _ in ALLOWLISTS])
    def test_python_protocols(self, factory):
        v = factory()
        kind = v.get_type()
        operations = [
            lambda: v[0],
            lambda: iter(v),
            lambda: list(v),
            lambda: hash(v),
            lambda: {v: 1},
            lambda: v(),
            lambda: int(v),
            lambda: float(v),
            lambda: v + v,
            lambda: v * 2,
        ]
        for op in operations:
            with pytest.raises(UnsupportedOperation) as exc_info:
                op()
            assert exc_info.value.left == kind

    @pytest.mark.parametrize("factory", [f for f, _ in ALLOWLISTS])
    def test_capability_methods(self, factory):
        v = factory()
        with pytest.raises(UnsupportedOperation):
            v.at(0)
        with pytest.raises(UnsupportedOperation):
            v.iterate()
        with pytest.raises(UnsupportedOperation):
            v.get_hash()
        with pytest.raises(UnsupportedOperation):
            v.call()
        with pytest.raises(UnsupportedOperation):
            v.to_int()

    def test_binop_reports_right_operand(self):
        with pytest.raises(UnsupportedOperation) as exc_info:
            _source() + _data()
        err = exc_info.value
        assert err.op == "+"
        assert err.left == "PythonSourceModule"
        assert err.right == "PythonResourceData"
        assert "PythonResourceData" in str(err)

    def test_assignment_rejected(self):
        """Values cannot be mutated."""
        v = _source()
        with pytest.raises(UnsupportedOperation) as exc_info:
            v.name = "other"
        assert exc_info.value.op == ".name ="
        with pytest.raises(UnsupportedOperation):
            v._record = None
        with pytest.raises(UnsupportedOperation):
            del v._record
        with pytest.raises(UnsupportedOperation):
            v.set_attr("is_package", False)
        assert v.get_attr("name").data == "pkg.mod"


class TestIndependence:
    """Wrapped values own a private copy of their record."""

    def test_deep_copy_on_construction(self):
        """Mutating the original record does not change the value."""
        libraries = ["ssl", "crypto"]
        em = ExtensionModuleData(name="_ssl", libraries=libraries)
        v = PythonExtensionModule(PythonExtensionModuleFlavor.dynamic_library(em))
        libraries.append("z")
        assert v.em.module.libraries == ("ssl", "crypto")
        assert v.em.module is not em

    def test_exposed_record_cannot_be_mutated(self):
        """Records reachable through a value hold no mutable sequences."""
        em = ExtensionModuleData(name="_ssl", libraries=["ssl"], library_dirs=["/usr/lib"])
        a = PythonExtensionModule(PythonExtensionModuleFlavor.dynamic_library(em))
        b = PythonExtensionModule(PythonExtensionModuleFlavor.dynamic_library(em))
        with pytest.raises(AttributeError):
            a.em.module.libraries.append("z")
        assert a == b

        dist = ExtensionModule(module="_ssl", object_paths=["a.o"], licenses=["MIT"])
        v = PythonExtensionModule(PythonExtensionModuleFlavor.distribution(dist))
        assert v.em.module.object_paths == ("a.o",)
        assert v.em.module.licenses == ("MIT",)

    def test_original_dropped(self):
        """Values survive the original record going away."""
        resource = ModuleSource(name="pkg.mod", source=b"", is_package=False)
        v = to_scripting_value(resource)
        del resource
        assert v.get_attr("name").data == "pkg.mod"

    def test_copy_returns_same_value(self):
        """Copies of immutable values are the value itself."""
        v = _data()
        assert copy.copy(v) is v
        assert copy.deepcopy(v) is v

    def test_direct_construction(self):
        """Wrapped kinds can be built from domain records directly."""
        record = BytecodeModule(name="m", source=b"",
                                optimize_level=BytecodeOptimizationLevel.ONE)
        v = PythonBytecodeModule(record)
        assert isinstance(v, TypedValue)
        assert v.get_attr("optimize_level").data == 1

    @pytest.mark.parametrize("level", [-1, 3, 7])
    def test_direct_construction_rejects_unknown_level(self, level):
        """Records cannot carry levels outside 0..2."""
        with pytest.raises(ValueError):
            PythonBytecodeModule(BytecodeModule(name="m", source=b"", optimize_level=level))

    def test_direct_construction_plain_int_level(self):
        """Plain integers are stored as enumeration members."""
        v = PythonBytecodeModule(BytecodeModule(name="m", source=b"", optimize_level=2))
        assert v.module.optimize_level is BytecodeOptimizationLevel.TWO
        assert v.to_str() == "PythonBytecodeModule<name=m; level=Two>"

    def test_base_class_is_abstract(self):
        """TypedValue itself cannot be instantiated."""
        with pytest.raises(TypeError):
            TypedValue(SourceModule(name="m", source=b""))
