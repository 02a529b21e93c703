"""
Tests for how a section view routes clicks to its capture state machine.

The widget methods are called on a stand-in object, so no Tk display is
needed; widgets are plain objects linked through ``master``.
"""

from types import SimpleNamespace

import pytest

pytest.importorskip("customtkinter")

from briefdesk.annotations.capture import Rect, SelectionCapture  # noqa: E402
from briefdesk.ui.annotatable_section import AnnotatableSection  # noqa: E402

REGION = Rect(left=0, top=0, width=500, height=200)
SELECTION = Rect(left=10, top=40, width=80, height=16)


def widget(master=None):
    return SimpleNamespace(master=master)


@pytest.fixture
def view():
    section = SimpleNamespace(
        capture=SelectionCapture("Audience", lambda t, s: None, lambda t, s, c: None),
        live_selection=False,
        renders=0,
    )
    section.body = widget(section)
    section._toolbar = widget(section)
    section._editor = None
    section.has_live_selection = lambda: section.live_selection
    section._contains = lambda w: AnnotatableSection._contains(section, w)

    def render():
        section.renders += 1
    section._render = render

    section.capture.pointer_release("buy less", SELECTION, REGION)
    return section


def click(view, target):
    AnnotatableSection.handle_outside_click(view, target)


class TestOutsideClick:
    def test_click_on_section_body_hides_toolbar(self, view):
        click(view, view.body)

        assert not view.capture.state.visible
        assert view.renders == 1

    def test_click_elsewhere_hides_toolbar(self, view):
        click(view, widget())

        assert not view.capture.state.visible

    def test_click_on_toolbar_button_keeps_toolbar(self, view):
        button = widget(widget(view._toolbar))

        click(view, button)

        assert view.capture.state.visible
        assert view.renders == 0

    def test_click_with_live_selection_keeps_toolbar(self, view):
        view.live_selection = True

        click(view, view.body)

        assert view.capture.state.visible

    def test_click_inside_comment_editor_keeps_it_open(self, view):
        view.capture.open_comment_editor()
        view._editor, view._toolbar = widget(view), None

        click(view, widget(view._editor))

        assert view.capture.state.visible

    def test_hidden_toolbar_ignores_clicks(self, view):
        view.capture.dismiss()

        click(view, view.body)

        assert view.renders == 0
