"""View layer: derive display values from device state and render templates.

``panel_view`` turns a store snapshot into a PanelView; ``template_renderer``
turns a PanelView into HTML fragments. Neither talks to the device.
"""
