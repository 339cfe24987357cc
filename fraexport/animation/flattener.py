"""
Animation Flattener

Resolves sprite entity id graphs (entity -> animation -> layer -> keyframe ->
symbol) into the compact output form of the .fra header.

Output per entity:
    {version, id, guid, tags, metadata, animations: [
        {name, metadata, layers: [
            {name, type, metadata, keyframes: [
                {length, metadata, symbol?: {data: [...], metadata, ...}}
            ]}
        ]}
    ]}

Symbol payloads are fixed-order numeric arrays per symbol type (see
symbols.py). Image symbols are placed on spritesheets through the shared
AtlasPacker, so entities must be flattened one at a time, in order.
"""

import copy
from typing import Any, Callable, Dict, List, Optional, Tuple

from fraexport.atlas import AtlasPacker, SpriteFrame, placeholder_asset
from fraexport.project import (
    ExportSource, SpriteEntityMetadata, SpriteAnimation, Layer, Keyframe,
    LayerType, KeyframeType, ImageSymbol, Symbol, DEFAULT_SCRIPT_LANGUAGE, engine_metadata,
)
from fraexport.utils import logDebug, logWarning
from .symbols import symbol_payload, TWEEN_WRITERS
from .tween import get_easing, trim_corrected_position


class AnimationFlattener:
    """
    Flatten sprite entities for the resource header.

    Usage:
        flattener = AnimationFlattener(source, packer)
        entity_data = flattener.flatten_entity(entity)
    """

    def __init__(self, source: ExportSource, packer: AtlasPacker):
        """
        Args:
            source: Export input, used to resolve image assets by guid
            packer: Packer receiving every image symbol's asset
        """
        self.source = source
        self.packer = packer
        self._placeholder = None

    # =========================================================================
    # Entities and animations
    # =========================================================================

    def begin_entity(self, entity: SpriteEntityMetadata) -> Dict[str, Any]:
        """Entity record with an empty animation list."""
        logDebug(f"Writing SpriteEntity: {entity.id}")
        return {
            'version': entity.version,
            'id': entity.id,
            'guid': entity.guid,
            'tags': list(entity.tags),
            'metadata': entity.metadata,
            'animations': [],
        }

    def flatten_entity(self, entity: SpriteEntityMetadata,
                       on_animation: Optional[Callable[[SpriteAnimation], None]] = None) -> Dict[str, Any]:
        """
        Flatten every animation of an entity.

        Args:
            entity: Sprite entity metadata with its lookup tables
            on_animation: Called after each animation is flattened

        Returns:
            Entity record
        """
        entity_data = self.begin_entity(entity)
        for animation in entity.animations:
            entity_data['animations'].append(self.flatten_animation(entity, animation))
            if on_animation is not None:
                on_animation(animation)
        return entity_data

    def flatten_animation(self, entity: SpriteEntityMetadata, animation: SpriteAnimation) -> Dict[str, Any]:
        logDebug(f"  Writing SpriteAnimation: {animation.name}")
        group = entity.spritesheet_group

        layers = []
        for layer_id in animation.layer_ids:
            layer = entity.find_layer(layer_id)
            if layer is None:
                logWarning(f"Could not find layer id: {layer_id} "
                           f"(entity: {entity.id}, animation: {animation.name})")
                continue
            layers.append(self._flatten_layer(entity, animation, layer, group))

        return {
            'name': animation.name,
            'layers': layers,
            'metadata': engine_metadata(animation.plugin_metadata),
        }

    # =========================================================================
    # Layers and keyframes
    # =========================================================================

    def _flatten_layer(self, entity: SpriteEntityMetadata, animation: SpriteAnimation,
                       layer: Layer, group: str) -> Dict[str, Any]:
        logDebug(f"    Writing Layer: {layer.name}")
        layer_data = {
            'name': layer.name,
            'type': layer.type,
            'keyframes': [],
            'metadata': engine_metadata(layer.plugin_metadata),
        }
        if layer.type == LayerType.TILEMAP:
            layer_data['tileWidth'] = layer.tile_width
            layer_data['tileHeight'] = layer.tile_height
            # Single tileset per layer for now
            layer_data['tileset'] = 0
        elif layer.type == LayerType.FRAME_SCRIPT:
            layer_data['language'] = layer.language or DEFAULT_SCRIPT_LANGUAGE

        for index, keyframe_id in enumerate(layer.keyframe_ids):
            keyframe = entity.find_keyframe(keyframe_id)
            if keyframe is None:
                logWarning(f"Could not find keyframe id: {keyframe_id} "
                           f"(animation: {animation.name}, layer: {layer.name})")
                continue

            keyframe_data, symbol, frame = self._flatten_keyframe(entity, animation, keyframe, index, group)
            layer_data['keyframes'].append(keyframe_data)

            if keyframe.tweened and keyframe.has_symbol_type and symbol is not None:
                next_symbol = self._next_symbol(entity, layer, index)
                if next_symbol is not None and next_symbol.type == symbol.type:
                    layer_data['keyframes'].extend(
                        self._tween_keyframes(keyframe_data, keyframe, symbol, next_symbol, frame))

        return layer_data

    def _flatten_keyframe(self, entity: SpriteEntityMetadata, animation: SpriteAnimation,
                          keyframe: Keyframe, index: int,
                          group: str) -> Tuple[Dict[str, Any], Optional[Symbol], Optional[SpriteFrame]]:
        """
        Returns:
            (keyframe record, resolved symbol or None, sprite frame for image symbols)
        """
        logDebug(f"      Writing keyframe {index}...")
        keyframe_data: Dict[str, Any] = {
            'length': keyframe.length,
            'metadata': engine_metadata(keyframe.plugin_metadata),
        }

        if keyframe.type == KeyframeType.FRAME_SCRIPT:
            keyframe_data['code'] = keyframe.code
            return keyframe_data, None, None
        if keyframe.type == KeyframeType.LABEL:
            keyframe_data['name'] = keyframe.name
            return keyframe_data, None, None
        if not keyframe.has_symbol_type:
            logWarning(f"Unknown keyframe type '{keyframe.type}' in animation {animation.name}")
            return keyframe_data, None, None

        if not keyframe.symbol_id:
            keyframe_data['symbol'] = None
            return keyframe_data, None, None

        symbol = entity.find_symbol(keyframe.symbol_id)
        if symbol is None:
            logWarning(f"Could not find {keyframe.type.lower()} symbol id: {keyframe.symbol_id} "
                       f"(animation: {animation.name}, keyframe: {index})")
            return keyframe_data, None, None
        if symbol.type != keyframe.type:
            logWarning(f"Symbol {keyframe.symbol_id} is {symbol.type}, expected {keyframe.type} "
                       f"(animation: {animation.name}, keyframe: {index})")
            return keyframe_data, None, None

        frame = None
        if isinstance(symbol, ImageSymbol):
            frame = self._place_symbol_image(symbol, animation, index, group)
            keyframe_data['symbol'] = self._image_payload(symbol, frame)
        else:
            keyframe_data['symbol'] = symbol_payload(symbol)
        return keyframe_data, symbol, frame

    def _next_symbol(self, entity: SpriteEntityMetadata, layer: Layer, index: int) -> Optional[Symbol]:
        """Symbol of the following keyframe, wrapping to the layer's first keyframe."""
        def symbol_at(i: int) -> Optional[Symbol]:
            if i >= len(layer.keyframe_ids):
                return None
            keyframe = entity.find_keyframe(layer.keyframe_ids[i])
            if keyframe is None:
                return None
            return entity.find_symbol(keyframe.symbol_id)

        return symbol_at(index + 1) or symbol_at(0)

    # =========================================================================
    # Images
    # =========================================================================

    def _place_symbol_image(self, symbol: ImageSymbol, animation: SpriteAnimation,
                            index: int, group: str) -> SpriteFrame:
        asset = self.source.get_asset(symbol.image_asset)
        if asset is None or asset.pixels is None:
            logWarning(f"Missing image asset: {symbol.image_asset} in animation {animation.name} "
                       f"keyframe: {index}. Will use placeholder...")
            asset = self.placeholder
        frame = self.packer.place_image(asset, group)
        logDebug(f"        Writing image symbol {asset.filename}...")
        return frame

    @property
    def placeholder(self):
        if self._placeholder is None:
            self._placeholder = placeholder_asset()
        return self._placeholder

    @staticmethod
    def _image_payload(symbol: ImageSymbol, frame: SpriteFrame) -> Dict[str, Any]:
        x, y = trim_corrected_position(symbol.x, symbol.y,
                                       frame.trim_offset.x, frame.trim_offset.y,
                                       symbol.rotation, symbol.scale_x, symbol.scale_y)
        return {
            'data': [
                x, y, symbol.alpha,
                symbol.pivot_x, symbol.pivot_y,
                symbol.rotation,
                symbol.scale_x, symbol.scale_y,
                frame.sheet_index, frame.frame_index,
            ],
            'metadata': engine_metadata(symbol.plugin_metadata),
        }

    # =========================================================================
    # Tweens
    # =========================================================================

    def _tween_keyframes(self, keyframe_data: Dict[str, Any], keyframe: Keyframe,
                         symbol: Symbol, next_symbol: Symbol,
                         frame: Optional[SpriteFrame]) -> List[Dict[str, Any]]:
        """
        Replace a tweened keyframe's duration with one frame per step.

        keyframe_data's length becomes 1; the returned list holds the
        length - 1 synthesized keyframes at t = i / length.
        """
        length = keyframe_data['length']
        keyframe_data['length'] = 1

        ease = get_easing(keyframe.tween_type)
        write = TWEEN_WRITERS[symbol.type]
        trim = frame.trim_offset if frame is not None else None

        tweened = []
        for i in range(1, length):
            step = copy.deepcopy(keyframe_data)
            write(step['symbol']['data'], symbol, next_symbol, i / length, ease, trim)
            tweened.append(step)
        logDebug(f"        Tweened {len(tweened)} frames ({keyframe.tween_type or 'LINEAR'})")
        return tweened
