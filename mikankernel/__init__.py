"""Parts of a small x86-64 hobby kernel as Python objects: graphics, fonts, console, memory, paging, timers, tasks, keyboard, PCI and ACPI."""

__version__ = "0.1.0"

__all__ = [
    "acpi",
    "console",
    "font",
    "frame_buffer",
    "graphics",
    "keyboard",
    "logger",
    "memory_manager",
    "paging",
    "pci",
    "task",
    "timer",
]