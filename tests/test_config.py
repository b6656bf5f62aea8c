import os
from datetime import timedelta
from textwrap import dedent

import pytest

from keyshift.config import ConfigError, load_configs, parse_config
from keyshift.key_press import KeyModifier, KeyPress, Modifier
from keyshift.keymap_action import KeyPressAndRelease, Launch, Remap, SetMark, SetMode, WithMark
from keyshift.keys import KEY_CODES
from keyshift.modmap import MultiPurposeKey, PressReleaseKey


def k(name):
    return KEY_CODES[f"KEY_{name}"]


def yaml_parse(text):
    return parse_config(dedent(text), "yaml")


def toml_parse(text):
    return parse_config(dedent(text), "toml")


def kpar(key, *modifiers):
    return KeyPressAndRelease(KeyPress(key, modifiers))


def test_yaml_modmap_basic():
    config = yaml_parse("""
    modmap:
      - name: Global
        remap:
          Alt_L: Ctrl_L
      - remap:
          Shift_R: Win_R
        application:
          only: Google-chrome
    """)
    assert len(config.modmap) == 2
    assert config.modmap[0].name == "Global"
    assert config.modmap[0].remap == {k("LEFTALT"): (k("LEFTCTRL"),)}
    assert config.modmap[1].remap == {k("RIGHTSHIFT"): (k("RIGHTMETA"),)}
    assert config.modmap[1].application.only[0].matches("Google-chrome")


def test_yaml_modmap_application():
    config = yaml_parse("""
    modmap:
      - remap:
          Alt_L: Ctrl_L
        application:
          not:
            - Gnome-terminal
      - remap:
          Shift_R: Win_R
        application:
          only: Google-chrome
    """)
    application = config.modmap[0].application
    assert application.only is None
    assert application.not_[0].matches("Gnome-terminal")


def test_yaml_modmap_application_regex():
    config = yaml_parse(r"""
    modmap:
      - remap:
          Alt_L: Ctrl_L
        application:
          not:
            - /^Minecraft/
            - /^Minecraft\//
            - /^Minecraft\d/
      - remap:
          Shift_R: Win_R
        application:
          only: /^Miencraft\\/
    """)
    first, second, third = config.modmap[0].application.not_
    assert first.matches("Minecraft 1.19")
    assert second.matches("Minecraft/x")
    assert not second.matches("Minecraft x")
    assert third.matches("Minecraft1")
    assert config.modmap[1].application.only[0].matches("Miencraft\\")


def test_yaml_modmap_multi_purpose_key():
    config = yaml_parse("""
    modmap:
      - remap:
          Space:
            held: Shift_L
            alone: Space
      - remap:
          Muhenkan:
            held: Alt_L
            alone: Muhenkan
            alone_timeout_millis: 500
    """)
    assert config.modmap[0].remap[k("SPACE")] == MultiPurposeKey(
        held=(k("LEFTSHIFT"),), alone=(k("SPACE"),), alone_timeout=timedelta(milliseconds=1000)
    )
    assert config.modmap[1].remap[k("MUHENKAN")].alone_timeout == timedelta(milliseconds=500)


def test_yaml_modmap_multi_purpose_key_without_timeout():
    config = yaml_parse("""
    modmap:
      - remap:
          Space:
            held: Shift_L
            alone: Space
            free_hold: true
    """)
    action = config.modmap[0].remap[k("SPACE")]
    assert action.free_hold is True
    assert action.alone_timeout == timedelta(milliseconds=1000)


def test_yaml_modmap_multi_purpose_key_multi_key():
    config = yaml_parse("""
    modmap:
      - remap:
          Space:
            held: [Shift_L]
            alone: [Shift_L,A]
      - remap:
          Muhenkan:
            held: [Alt_L,Shift_L]
            alone: [Muhenkan]
            alone_timeout_millis: 500
    """)
    assert config.modmap[0].remap[k("SPACE")].alone == (k("LEFTSHIFT"), k("A"))
    assert config.modmap[1].remap[k("MUHENKAN")].held == (k("LEFTALT"), k("LEFTSHIFT"))


def test_yaml_virtual_modifiers():
    config = yaml_parse("""
    virtual_modifiers:
      - CapsLock
    """)
    assert config.virtual_modifiers == [k("CAPSLOCK")]


def test_yaml_modmap_press_release_key():
    config = yaml_parse("""
    modmap:
      - remap:
          Space:
            press: { launch: ["wmctrl", "-x", "-a", "code.Code"] }
            release: { launch: ["wmctrl", "-x", "-a", "nocturn.Nocturn"] }
    """)
    assert config.modmap[0].remap[k("SPACE")] == PressReleaseKey(
        press=[Launch(("wmctrl", "-x", "-a", "code.Code"))],
        release=[Launch(("wmctrl", "-x", "-a", "nocturn.Nocturn"))],
    )


def test_yaml_keymap_basic():
    config = yaml_parse("""
    keymap:
      - name: Global
        remap:
          Alt-Enter: Ctrl-Enter
      - remap:
          M-S: C-S
    """)
    assert config.keymap[0].name == "Global"
    assert config.keymap[0].remap == {
        KeyPress(k("ENTER"), (Modifier.ALT,)): [kpar(k("ENTER"), Modifier.CONTROL)]
    }
    assert config.keymap[1].remap == {KeyPress(k("S"), (Modifier.ALT,)): [kpar(k("S"), Modifier.CONTROL)]}


def test_yaml_keymap_lr_modifiers():
    config = yaml_parse("""
    keymap:
      - name: Global
        remap:
          Alt_L-Enter: Ctrl_L-Enter
      - remap:
          M_R-S: C_L-S
    """)
    assert config.keymap[0].remap == {
        KeyPress(k("ENTER"), (KeyModifier(k("LEFTALT")),)): [kpar(k("ENTER"), KeyModifier(k("LEFTCTRL")))]
    }
    assert config.keymap[1].remap == {
        KeyPress(k("S"), (KeyModifier(k("RIGHTALT")),)): [kpar(k("S"), KeyModifier(k("LEFTCTRL")))]
    }


def test_yaml_keymap_application():
    config = yaml_parse("""
    keymap:
      - remap:
          Alt-Enter: Ctrl-Enter
        application:
          not: Gnome-terminal
      - remap:
          Alt-S: Ctrl-S
        application:
          only:
            - Gnome-terminal
    """)
    assert config.keymap[0].application.not_[0].matches("Gnome-terminal")
    assert config.keymap[1].application.only[0].matches("Gnome-terminal")
    assert config.keymap[1].application.not_ is None


def test_yaml_keymap_array():
    config = yaml_parse("""
    keymap:
      - remap:
          C-w:
            - Shift-C-w
            - C-x
    """)
    assert config.keymap[0].remap[KeyPress(k("W"), (Modifier.CONTROL,))] == [
        kpar(k("W"), Modifier.SHIFT, Modifier.CONTROL),
        kpar(k("X"), Modifier.CONTROL),
    ]


def test_yaml_keymap_remap():
    config = yaml_parse("""
    keymap:
      - remap:
          C-x:
            remap:
              s: C-w
              C-s:
                remap:
                  x: C-z
            timeout_key: Down
            timeout_millis: 1000
    """)
    (action,) = config.keymap[0].remap[KeyPress(k("X"), (Modifier.CONTROL,))]
    assert isinstance(action, Remap)
    assert action.timeout == timedelta(milliseconds=1000)
    assert action.timeout_key == (k("DOWN"),)
    assert action.remap[KeyPress(k("S"))] == [kpar(k("W"), Modifier.CONTROL)]
    (nested,) = action.remap[KeyPress(k("S"), (Modifier.CONTROL,))]
    assert nested.remap == {KeyPress(k("X")): [kpar(k("Z"), Modifier.CONTROL)]}
    assert nested.timeout is None


def test_yaml_keymap_remap_timeout_as_sequence():
    config = yaml_parse("""
    keymap:
      - remap:
          C-x:
            remap:
              s: C-w
              C-s:
                remap:
                  x: C-z
            timeout_key: [Down,Up]
            timeout_millis: 1000
    """)
    (action,) = config.keymap[0].remap[KeyPress(k("X"), (Modifier.CONTROL,))]
    assert action.timeout_key == (k("DOWN"), k("UP"))


def test_yaml_keymap_launch():
    config = yaml_parse("""
    keymap:
      - remap:
          KEY_GRAVE:
            launch:
              - "/bin/sh"
              - "-c"
              - "date > /tmp/hotkey_test"
    """)
    assert config.keymap[0].remap[KeyPress(k("GRAVE"))] == [Launch(("/bin/sh", "-c", "date > /tmp/hotkey_test"))]


def test_yaml_keymap_mode():
    config = yaml_parse("""
    default_mode: insert
    keymap:
      - mode: insert
        remap:
          Esc: { set_mode: normal }
      - mode: normal
        remap:
          i: { set_mode: insert }
          h: Left
          j: Down
          k: Up
          l: Right
    """)
    assert config.default_mode == "insert"
    assert config.keymap[0].mode == ("insert",)
    assert config.keymap[0].remap[KeyPress(k("ESC"))] == [SetMode("normal")]
    assert config.keymap[1].remap[KeyPress(k("I"))] == [SetMode("insert")]
    assert config.keymap[1].remap[KeyPress(k("H"))] == [kpar(k("LEFT"))]


def test_yaml_keymap_mark():
    config = yaml_parse("""
    keymap:
      - remap:
          C-space: { set_mark: true }
          C-g: [esc, { set_mark: false }]
          C-b: { with_mark: left }
          M-b: { with_mark: C-left }
    """)
    remap = config.keymap[0].remap
    assert remap[KeyPress(k("SPACE"), (Modifier.CONTROL,))] == [SetMark(True)]
    assert remap[KeyPress(k("G"), (Modifier.CONTROL,))] == [kpar(k("ESC")), SetMark(False)]
    assert remap[KeyPress(k("B"), (Modifier.CONTROL,))] == [WithMark(KeyPress(k("LEFT")))]
    assert remap[KeyPress(k("B"), (Modifier.ALT,))] == [WithMark(KeyPress(k("LEFT"), (Modifier.CONTROL,)))]


def test_yaml_shared_data_anchor():
    config = yaml_parse("""
    shared:
      terminals: &terminals
        - Gnome-terminal
        - Kitty

    modmap:
      - remap:
          Alt_L: Ctrl_L
        application:
          not: *terminals
      - remap:
          Shift_R: Win_R
        application:
          only: Google-chrome
    """)
    matchers = config.modmap[0].application.not_
    assert len(matchers) == 2
    assert matchers[1].matches("Kitty")


def test_yaml_fail_on_data_outside_of_config_model():
    with pytest.raises(ConfigError):
        yaml_parse("""
        terminals: &terminals
          - Gnome-terminal
          - Kitty

        modmap:
          - remap:
              Alt_L: Ctrl_L
            application:
              not: *terminals
          - remap:
              Shift_R: Win_R
            application:
              only: Google-chrome
        """)


def test_yaml_no_keymap_action():
    config = yaml_parse("""
    keymap:
      - remap:
          f12: []
    """)
    assert config.keymap[0].remap == {KeyPress(k("F12")): []}

    config = yaml_parse("""
    keymap:
      - remap:
          f12: null
    """)
    assert config.keymap[0].remap == {KeyPress(k("F12")): []}


def test_toml_modmap_basic():
    config = toml_parse("""
    [[modmap]]
    name = "Global"
    [modmap.remap]
    Alt_L = "Ctrl_L"

    [[modmap]]
    [modmap.remap]
    Shift_R = "Win_R"

    [modmap.application]
    only = "Google-chrome"
    """)
    assert config.modmap[0].name == "Global"
    assert config.modmap[0].remap == {k("LEFTALT"): (k("LEFTCTRL"),)}
    assert config.modmap[1].application.only[0].matches("Google-chrome")


def test_toml_modmap_application():
    config = toml_parse("""
    [[modmap]]
    [modmap.remap]
    Alt_L = "Ctrl_L"

    [modmap.application]
    not = [ "Gnome-terminal" ]

    [[modmap]]
    [modmap.remap]
    Shift_R = "Win_R"

    [modmap.application]
    only = "Google-chrome"

    """)
    assert config.modmap[0].application.not_[0].matches("Gnome-terminal")
    assert config.modmap[1].application.only[0].matches("Google-chrome")


def test_toml_modmap_application_regex():
    config = toml_parse(r"""
    [[modmap]]
    [modmap.remap]
    Alt_L = "Ctrl_L"

    [modmap.application]
    not = [ "/^Minecraft/", "/^Minecraft\\//", "/^Minecraft\\d/" ]

    [[modmap]]
    [modmap.remap]
    Shift_R = "Win_R"

    [modmap.application]
    only = "/^Miencraft\\\\/"

    """)
    first, second, third = config.modmap[0].application.not_
    assert first.matches("Minecraft")
    assert second.matches("Minecraft/")
    assert third.matches("Minecraft7")
    assert config.modmap[1].application.only[0].matches("Miencraft\\")


def test_toml_modmap_multi_purpose_key():
    config = toml_parse("""
    [[modmap]]
    [modmap.remap.Space]
    held = [ "Shift_L" ]
    alone = "Space"

    [[modmap]]
    [modmap.remap.Muhenkan]
    held = [ "Alt_L", "Shift_L" ]
    alone = [ "Muhenkan" ]
    alone_timeout_millis = 500
    """)
    assert config.modmap[0].remap[k("SPACE")] == MultiPurposeKey(held=(k("LEFTSHIFT"),), alone=(k("SPACE"),))
    assert config.modmap[1].remap[k("MUHENKAN")].alone_timeout == timedelta(milliseconds=500)


def test_toml_modmap_multi_purpose_key_multi_key():
    config = toml_parse("""
    [[modmap]]
    [modmap.remap.Space]
    held = [ "Shift_L" ]
    alone = [ "Shift_L", "A" ]

    [[modmap]]
    [modmap.remap.Muhenkan]
    held = [ "Alt_L", "Shift_L" ]
    alone = [ "Muhenkan" ]
    alone_timeout_millis = 500
    """)
    assert config.modmap[0].remap[k("SPACE")].alone == (k("LEFTSHIFT"), k("A"))


def test_toml_virtual_modifiers():
    config = toml_parse("""
    virtual_modifiers = [ "CapsLock" ]
    """)
    assert config.virtual_modifiers == [k("CAPSLOCK")]


def test_toml_modmap_press_release_key():
    config = toml_parse("""
    [[modmap]]
    [modmap.remap.Space.press]
    launch = [ "wmctrl", "-x", "-a", "code.Code" ]
    [modmap.remap.Space.release]
    launch = ["wmctrl", "-x", "-a", "nocturn.Nocturn"]
    """)
    action = config.modmap[0].remap[k("SPACE")]
    assert action.press == [Launch(("wmctrl", "-x", "-a", "code.Code"))]
    assert action.release == [Launch(("wmctrl", "-x", "-a", "nocturn.Nocturn"))]


def test_toml_keymap_basic():
    config = toml_parse("""
    [[keymap]]
    name = "Global"
    [keymap.remap]
    Alt-Enter = "Ctrl-Enter"

    [[keymap]]
    [keymap.remap]
    M-S = "C-S"
    """)
    assert config.keymap[0].remap == {
        KeyPress(k("ENTER"), (Modifier.ALT,)): [kpar(k("ENTER"), Modifier.CONTROL)]
    }
    assert config.keymap[1].remap == {KeyPress(k("S"), (Modifier.ALT,)): [kpar(k("S"), Modifier.CONTROL)]}


def test_toml_keymap_lr_modifiers():
    config = toml_parse("""
    [[keymap]]
    name = "Global"
    [keymap.remap]
    Alt_L-Enter = "Ctrl_L-Enter"

    [[keymap]]
    [keymap.remap]
    M_R-S = "C_L-S"
    """)
    assert config.keymap[1].remap == {
        KeyPress(k("S"), (KeyModifier(k("RIGHTALT")),)): [kpar(k("S"), KeyModifier(k("LEFTCTRL")))]
    }


def test_toml_keymap_application():
    config = toml_parse("""
    [[keymap]]
    [keymap.remap]
    Alt-Enter = "Ctrl-Enter"
    [keymap.application]
    not = "Gnome-terminal"
    [[keymap]]
    [keymap.remap]
    Alt-S = "Ctrl-S"
    [keymap.application]
    only = "Gnome-terminal"
    """)
    assert config.keymap[0].application.not_[0].matches("Gnome-terminal")
    assert config.keymap[1].application.only[0].matches("Gnome-terminal")


def test_toml_keymap_array():
    config = toml_parse("""
    [[keymap]]
    [keymap.remap]
    C-w = ["Shift-C-w", "C-x"]
    """)
    assert config.keymap[0].remap[KeyPress(k("W"), (Modifier.CONTROL,))] == [
        kpar(k("W"), Modifier.SHIFT, Modifier.CONTROL),
        kpar(k("X"), Modifier.CONTROL),
    ]


def test_toml_keymap_remap():
    config = toml_parse("""
    [[keymap]]
    [keymap.remap.C-x]
    timeout_key = "Down"
    timeout_millis = 1_000

    [keymap.remap.C-x.remap]
    s = "C-w"

    [keymap.remap.C-x.remap.C-s.remap]
    x = "C-z"
    """)
    (action,) = config.keymap[0].remap[KeyPress(k("X"), (Modifier.CONTROL,))]
    assert action.timeout == timedelta(milliseconds=1000)
    assert action.timeout_key == (k("DOWN"),)
    (nested,) = action.remap[KeyPress(k("S"), (Modifier.CONTROL,))]
    assert nested.remap == {KeyPress(k("X")): [kpar(k("Z"), Modifier.CONTROL)]}


def test_toml_keymap_remap_timeout_key_sequence():
    config = toml_parse("""
    [[keymap]]
    [keymap.remap.C-x]
    timeout_key = [ "Down", "UP" ]
    timeout_millis = 1_000

    [keymap.remap.C-x.remap]
    s = "C-w"

    [keymap.remap.C-x.remap.C-s.remap]
    x = "C-z"
    """)
    (action,) = config.keymap[0].remap[KeyPress(k("X"), (Modifier.CONTROL,))]
    assert action.timeout_key == (k("DOWN"), k("UP"))


def test_toml_keymap_launch():
    config = toml_parse("""
    [[keymap]]
    [keymap.remap.KEY_GRAVE]
    launch = [ "/bin/sh", "-c", "date > /tmp/hotkey_test" ]
    """)
    assert config.keymap[0].remap[KeyPress(k("GRAVE"))] == [Launch(("/bin/sh", "-c", "date > /tmp/hotkey_test"))]


def test_toml_keymap_mode():
    config = toml_parse("""
    default_mode = "insert"

    [[keymap]]
    mode = "instert"

    [keymap.remap.Esc]
    set_mode = "normal"

    [[keymap]]
    mode = "normal"

    [keymap.remap]
    h = "Left"
    j = "Down"
    k = "Up"
    l = "Right"

    [keymap.remap.i]
    set_mode = "insert"

    """)
    assert config.default_mode == "insert"
    assert config.keymap[0].mode == ("instert",)
    assert config.keymap[0].remap[KeyPress(k("ESC"))] == [SetMode("normal")]
    assert config.keymap[1].remap[KeyPress(k("I"))] == [SetMode("insert")]
    assert config.keymap[1].remap[KeyPress(k("L"))] == [kpar(k("RIGHT"))]


def test_toml_keymap_mark():
    config = toml_parse("""
    [[keymap]]
    [keymap.remap]
    C-g = [ "esc", { set_mark = false } ]

    [keymap.remap.C-space]
    set_mark = true

    [keymap.remap.C-b]
    with_mark = "left"

    [keymap.remap.M-b]
    with_mark = "C-left"
    """)
    remap = config.keymap[0].remap
    assert remap[KeyPress(k("G"), (Modifier.CONTROL,))] == [kpar(k("ESC")), SetMark(False)]
    assert remap[KeyPress(k("SPACE"), (Modifier.CONTROL,))] == [SetMark(True)]
    assert remap[KeyPress(k("B"), (Modifier.ALT,))] == [WithMark(KeyPress(k("LEFT"), (Modifier.CONTROL,)))]


def test_toml_shared_data_anchor():
    config = toml_parse("""
    [shared]
    terminals = [ "Gnome-terminal", "Kitty" ]

    [[shared.modmap]]
    [shared.modmap.remap]
    Alt_L = "Ctrl_L"

    [shared.modmap.application]
    not = "terminals"

    [[shared.modmap]]
    [shared.modmap.remap]
    Shift_R = "Win_R"

    [shared.modmap.application]
    only = "Google-chrome"
    """)
    assert config.modmap == []
    assert config.keymap == []


def test_toml_fail_on_data_outside_of_config_model():
    with pytest.raises(ConfigError):
        toml_parse("""
        terminals = [ "Gnome-terminal", "Kitty" ]

        [[modmap]]
        [modmap.remap]
        Alt_L = "Ctrl_L"

        [modmap.application]
        not = [ "Gnome-terminal", "Kitty" ]

        [[modmap]]
        [modmap.remap]
        Shift_R = "Win_R"

        [modmap.application]
        only = "Google-chrome"
        """)


def test_toml_no_keymap_action():
    config = toml_parse("""
    [[keymap]]
    [keymap.remap]
    f12 = []
    """)
    assert config.keymap[0].remap == {KeyPress(k("F12")): []}


def test_defaults_of_empty_document():
    config = yaml_parse("")
    assert config.default_mode == "default"
    assert config.enable_wheel is True
    assert config.keypress_delay_ms == 0
    assert config.modmap == [] and config.keymap == []


def test_yaml_booleans_are_only_true_and_false():
    config = yaml_parse("""
    default_mode: yes
    enable_wheel: false
    """)
    assert config.default_mode == "yes"
    assert config.enable_wheel is False


def test_yaml_numeric_key_is_a_key_name():
    config = yaml_parse("""
    keymap:
      - remap:
          1: C-a
    """)
    assert config.keymap[0].remap == {KeyPress(k("1")): [kpar(k("A"), Modifier.CONTROL)]}


@pytest.mark.parametrize(
    "text",
    [
        "modmap:\n  - remap:\n      NotAKey: A\n",
        "keymap: notalist\n",
        "keypress_delay_ms: -1\n",
        "- just\n- a list\n",
        "modmap: [\n",
    ],
)
def test_yaml_errors(text):
    with pytest.raises(ConfigError):
        parse_config(text, "yaml")


def test_toml_syntax_error():
    with pytest.raises(ConfigError):
        parse_config("[[keymap\n", "toml")


def test_unknown_filetype():
    with pytest.raises(ValueError):
        parse_config("", "xml")


def test_load_configs_merges_files(tmp_path):
    first = tmp_path / "first.yml"
    first.write_text("default_mode: insert\nvirtual_modifiers: [CapsLock]\nkeymap:\n  - remap:\n      C-a: b\n")
    second = tmp_path / "second.TOML"
    second.write_text('default_mode = "other"\nvirtual_modifiers = ["F13"]\n[[keymap]]\n[keymap.remap]\nC-b = "c"\n')
    config = load_configs([first, second])
    assert config.default_mode == "insert"
    assert config.virtual_modifiers == [k("CAPSLOCK"), k("F13")]
    assert len(config.keymap) == 2
    assert set(config.keymap_table) == {k("A"), k("B")}
    assert config.modify_time == os.stat(second).st_mtime


def test_load_configs_requires_a_file():
    with pytest.raises(ConfigError):
        load_configs([])


def test_load_configs_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_configs([tmp_path / "missing.yml"])