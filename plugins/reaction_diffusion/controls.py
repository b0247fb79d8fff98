"""
Panel widgets for the reaction-diffusion viewer.

Every widget owns a pygame.Rect in panel-local coordinates, returns True from
`handle_event` when it consumed the event, and paints itself in `draw`.
ControlPanel stacks widgets top to bottom and moves window events into
panel space.
"""

import pygame


THEME = {
    "bg": (0, 0, 0),
    "panel": (14, 18, 12),
    "track": (45, 55, 40),
    "accent": (74, 93, 58),
    "accent_on": (120, 160, 90),
    "knob": (235, 240, 228),
    "text": (200, 210, 195),
    "text_bright": (255, 255, 255),
    "text_dim": (120, 135, 110),
}


def _left_press(event, rect):
    return (event.type == pygame.MOUSEBUTTONDOWN and event.button == 1
            and rect.collidepoint(event.pos))


class Widget:
    height = 0

    def __init__(self, rect):
        self.rect = pygame.Rect(rect)

    def handle_event(self, event):
        return False

    def draw(self, surface, font):
        pass


class SectionHeader(Widget):
    height = 24

    def __init__(self, rect, title):
        super().__init__(rect)
        self.title = title

    def draw(self, surface, font):
        y = self.rect.y + 8
        pygame.draw.line(surface, THEME["accent"],
                         (self.rect.x + 8, y), (self.rect.right - 8, y))
        surface.blit(font.render(self.title, True, THEME["text_dim"]),
                     (self.rect.x + 8, y + 4))


class Slider(Widget):
    """Labelled slider over [lo, hi], snapped to `step` when one is given.

    Assigning `value` clamps it to the range without firing `on_change`;
    only dragging reports back.
    """

    height = 36

    def __init__(self, rect, label, lo, hi, value, fmt=".3f", step=None,
                 on_change=None):
        super().__init__(rect)
        self.label = label
        self.lo = lo
        self.hi = hi
        self.fmt = fmt
        self.step = step
        self.on_change = on_change
        self.dragging = False
        self.track = pygame.Rect(self.rect.x + 8, self.rect.y + 20,
                                 self.rect.width - 16, 4)
        self.value = value

    @property
    def value(self):
        return self._value

    @value.setter
    def value(self, val):
        self._value = min(self.hi, max(self.lo, val))

    def _value_at(self, px):
        frac = min(1.0, max(0.0, (px - self.track.x) / self.track.width))
        val = self.lo + frac * (self.hi - self.lo)
        if self.step:
            val = self.lo + round((val - self.lo) / self.step) * self.step
        return val

    def handle_event(self, event):
        if _left_press(event, self.track.inflate(8, 24)):
            self.dragging = True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.dragging = False
            return False
        elif not (event.type == pygame.MOUSEMOTION and self.dragging):
            return False

        self.value = self._value_at(event.pos[0])
        if self.on_change:
            self.on_change(self.value)
        return True

    def draw(self, surface, font):
        surface.blit(font.render(self.label, True, THEME["text"]),
                     (self.rect.x + 8, self.rect.y + 2))
        shown = font.render(format(self.value, self.fmt), True, THEME["text_bright"])
        surface.blit(shown, (self.rect.right - 8 - shown.get_width(), self.rect.y + 2))

        pygame.draw.rect(surface, THEME["track"], self.track, border_radius=2)
        filled = self.track.copy()
        filled.width = round((self.value - self.lo) / (self.hi - self.lo) * self.track.width)
        pygame.draw.rect(surface, THEME["accent"], filled, border_radius=2)
        pygame.draw.circle(surface, THEME["knob"], (filled.right, self.track.centery),
                           9 if self.dragging else 7)


class Button(Widget):
    height = 28

    def __init__(self, rect, label, on_click=None, active=False):
        super().__init__(rect)
        self.label = label
        self.on_click = on_click
        self.active = active

    def handle_event(self, event):
        if not _left_press(event, self.rect):
            return False
        if self.on_click:
            self.on_click()
        return True

    def draw(self, surface, font):
        fill = THEME["accent_on"] if self.active else THEME["accent"]
        pygame.draw.rect(surface, fill, self.rect, border_radius=5)
        text = font.render(self.label, True, THEME["text_bright"])
        surface.blit(text, text.get_rect(center=self.rect.center))


class Toggle(Button):
    """Two-state button; `on_toggle(active)` fires on every change."""

    def __init__(self, rect, label, on_toggle=None, active=False):
        super().__init__(rect, label, on_click=self.flip, active=active)
        self.on_toggle = on_toggle

    def flip(self):
        self.set_active(not self.active)

    def set_active(self, active):
        self.active = active
        if self.on_toggle:
            self.on_toggle(active)

    def draw(self, surface, font):
        super().draw(surface, font)
        pill = pygame.Rect(0, 0, 26, 14)
        pill.midright = (self.rect.right - 8, self.rect.centery)
        pygame.draw.rect(surface, THEME["track"], pill, border_radius=7)
        knob_x = pill.right - 7 if self.active else pill.x + 7
        pygame.draw.circle(surface, THEME["knob"], (knob_x, pill.centery), 5)


class ButtonRow(Widget):
    """Radio group laid out as a grid of equal-width buttons."""

    def __init__(self, rect, labels, selected=0, on_select=None,
                 columns=3, gap=5, button_height=26):
        area = pygame.Rect(rect)
        x, y, width = area.x, area.y, area.width
        rows = -(-len(labels) // columns)
        bw = (width - gap * (columns - 1)) // columns
        self.buttons = [
            Button((x + (i % columns) * (bw + gap),
                    y + (i // columns) * (button_height + gap),
                    bw, button_height), label)
            for i, label in enumerate(labels)
        ]
        super().__init__((x, y, width, rows * (button_height + gap) - gap))
        self.on_select = on_select
        self.select(selected)

    def select(self, idx):
        self.selected = idx
        for i, btn in enumerate(self.buttons):
            btn.active = i == idx

    def handle_event(self, event):
        for i, btn in enumerate(self.buttons):
            if btn.handle_event(event):
                self.select(i)
                if self.on_select:
                    self.on_select(i, btn.label)
                return True
        return False

    def draw(self, surface, font):
        for btn in self.buttons:
            btn.draw(surface, font)


class ControlPanel:
    """Vertical stack of widgets painted onto an off-screen surface at (x, y)."""

    margin = 8

    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.widgets = []
        self.surface = pygame.Surface((width, height))
        self._cursor_y = self.margin

    def _slot(self, height, inset=True):
        m = self.margin if inset else 0
        return (m, self._cursor_y, self.width - 2 * m, height)

    def _stack(self, widget, gap):
        self.widgets.append(widget)
        self._cursor_y += widget.rect.height + gap
        return widget

    def add_section(self, title):
        return self._stack(SectionHeader(self._slot(SectionHeader.height, inset=False), title), 4)

    def add_slider(self, label, lo, hi, value, fmt=".3f", step=None, on_change=None):
        slider = Slider(self._slot(Slider.height, inset=False), label, lo, hi, value,
                        fmt, step, on_change)
        return self._stack(slider, 6)

    def add_button_row(self, labels, selected=0, on_select=None):
        return self._stack(ButtonRow(self._slot(0), labels, selected, on_select), 8)

    def add_button(self, label, on_click=None):
        return self._stack(Button(self._slot(Button.height), label, on_click), 8)

    def add_toggle(self, label, active=False, on_toggle=None):
        return self._stack(Toggle(self._slot(Button.height), label, on_toggle, active), 8)

    def add_spacer(self, height=8):
        self._cursor_y += height

    def handle_event(self, event):
        """Route a window event to the widgets. True if one of them used it."""
        if hasattr(event, "pos"):
            local = (event.pos[0] - self.x, event.pos[1] - self.y)
            if not self.surface.get_rect().collidepoint(local):
                # A drag released off the panel still ends
                if event.type == pygame.MOUSEBUTTONUP:
                    for widget in self.widgets:
                        if isinstance(widget, Slider):
                            widget.dragging = False
                return False
            event = pygame.event.Event(event.type, dict(event.dict, pos=local))
        return any(widget.handle_event(event) for widget in self.widgets)

    def draw(self, target, font):
        self.surface.fill(THEME["panel"])
        pygame.draw.line(self.surface, THEME["accent"], (0, 0), (0, self.height))
        for widget in self.widgets:
            widget.draw(self.surface, font)
        target.blit(self.surface, (self.x, self.y))
