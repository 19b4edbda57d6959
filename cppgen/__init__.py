"""cppgen -- C++ project generator.

Generates CMake-based C++ project skeletons either from a TOML configuration
and a categorised template set, or by replaying an arbitrary template folder.
"""

__version__ = "0.1.0"
