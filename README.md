# keyshift

keyshift is a library for key remapping on Linux. It has these parts:

- It reads remapping configurations written in YAML or TOML.
- It parses key names and key chords.
- It matches applications, windows and input devices against filters.
- It models the input events and output actions of a remapper.
- It carries those actions out on an output device that you supply.

## Installation

Install the package with pip. It needs Python 3.11 or later and PyYAML. The
`test` extra adds pytest.

## Configuration files

A configuration is written in YAML. Files whose name ends in `.toml` are read
as TOML instead. These are the top-level entries:

| Entry | Meaning |
| --- | --- |
| `modmap` | Key-to-key remappings, multi-purpose keys and press/release actions. |
| `keymap` | Key chords such as `C-x` or `Alt-Enter`, each mapped to one action, a list of actions, or `null` for no action. |
| `default_mode` | The starting mode. Defaults to `default`. |
| `virtual_modifiers` | Keys to treat as modifiers. |
| `keypress_delay_ms` | A non-negative integer. Defaults to `0`. |
| `enable_wheel` | A boolean. Defaults to `true`. |
| `shared` | Free-form data that is ignored, for example as a place for YAML anchors. |

Any other top-level key raises `keyshift.config.ConfigError`.

```yaml
modmap:
  - name: Global
    remap:
      CapsLock: Ctrl_L
      Space:
        held: Shift_L
        alone: Space
        alone_timeout_millis: 500
keymap:
  - remap:
      C-b: left
      C-g: [esc, { set_mark: false }]
      KEY_GRAVE: { launch: ["/bin/sh", "-c", "date"] }
      C-x:
        remap:
          s: C-w
        timeout_millis: 1000
        timeout_key: Down
    application:
      not: [Gnome-terminal, /^Minecraft/]
```

A keymap action can take any of these forms:

- A key chord.
- `{press: key}`, `{repeat: key}` or `{release: key}`.
- A nested `{remap: ...}`, with optional `timeout_millis` and `timeout_key`.
- `{launch: [...]}`.
- `{set_mode: name}`.
- `{set_mark: bool}`.
- `{with_mark: chord}`.
- `{escape_next_key: bool}`.
- `{sleep: millis}`.

The parsers for these forms are in `keyshift.keymap_action`.

A modmap value can take any of these forms:

- A key, or a list of keys.
- A multi-purpose key with `held`, `alone`, `alone_timeout_millis` (default 1000) and `free_hold` (default false).
- Press/release actions with `press`, `repeat`, `release` and `skip_key_event`.

The parsers for these forms are in `keyshift.modmap`.

## Usage

```python
from keyshift.config import load_configs, parse_config
from keyshift.keys import parse_key, key_name
from keyshift.key_press import parse_key_press
from keyshift.application import parse_matcher

config = load_configs(["base.yml", "extra.toml"])
print(config.default_mode, len(config.keymap), config.keymap_table.keys())

parse_key("enter")                       # code of KEY_ENTER
key_name(parse_key("Ctrl_L"))            # "KEY_LEFTCTRL"
parse_key_press("Shift-2")               # KeyPress with Modifier.SHIFT
parse_matcher("/^Minecraft/").matches("Minecraft 1.19")  # True
```

### Merging files and parsing text

`load_configs` takes all settings from the first file. From each later file, it
appends only the `modmap`, `keymap` and `virtual_modifiers` entries. It records
the modification time of the last file. It also builds `keymap_table`, which
indexes the keymaps by their triggering key.

`parse_config(text, "yaml" | "toml")` parses text that you already have in
memory.

### Key names and chords

Key names are case-insensitive, and the `KEY_` prefix may be left out. These
aliases are accepted:

- `Shift_L`, `Shift_R`
- `Ctrl_L`, `Control_L`, `C_L` and their `_R` forms
- `Alt_L`, `M_L` and their `_R` forms
- `Super_L`, `Win_L` and their `_R` forms
- `ANY`

Mouse movement and scrolling are represented by names such as `XUPSCROLL` and
`XRIGHTCURSOR`.

An unknown name raises `UnknownKeyError`.

In a chord, these modifiers match either the left or the right key:

- `Shift`
- `C`, `Ctrl`, `Control`
- `M`, `Alt`
- `Super`, `Win`, `Windows`

Any other key name used as a modifier matches that exact key.

### Application and window filters

- `class.name` must match the whole name.
- A plain `name` matches the part after the last dot.
- `/regex/` is searched for as a regular expression. `\/` inside it stands for a slash.

### Device filters

`keyshift.device.InputDeviceInfo.matches` accepts any of these:

- The full path, or `eventN` as a shorthand for it.
- The exact device name, or any part of it.
- `ids:VENDOR:PRODUCT` in hexadecimal. A `0` in either place matches any value.

### Events and actions

`keyshift.event.make_event` converts a raw `InputEvent` into one of these:

- `DeviceKeyEvent`
- `DeviceRelativeEvent`
- `OtherEvent`

`keyshift.action_dispatcher.ActionDispatcher` wraps any object that has an
`emit(events)` method. Its `on_action` method carries out one action:

| Action | What `on_action` does |
| --- | --- |
| `EmitKey`, `EmitRelative`, `EmitInput` | Emits the event. |
| `MouseMovementBatch` | Emits all the events in one call. |
| `Command` | Starts the program detached, with its standard streams set to null. |
| `Delay` | Sleeps for the given time. |

### Window-manager clients

`keyshift.client.build_client` returns a `WMClient`. The client checks once
whether it is supported, and it prints the application or window each time
that value changes. `build_client` accepts two kinds:

- `"none"` returns a client that never reports anything.
- `"niri"` queries the Niri compositor through the socket named in `NIRI_SOCKET`.

## What this package does not do

- keyshift has no command-line program and no main loop.
- It does not open or grab devices under `/dev/input`.
- It does not create a virtual output device.
- It does not apply modmaps and keymaps to live events.
- It does not watch configuration files for changes.
- The only window-manager client it includes is for Niri.

To run a remapper, you must write the device handling and event processing
yourself on top of these building blocks.