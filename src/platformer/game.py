# src/platformer/game.py
import sys, argparse, logging, math
import pygame
from pygame import K_ESCAPE, K_r

from .config import WIDTH, HEIGHT, FPS, COLOR_FG, COLOR_FOOD, COLOR_POWERUP, COLOR_DANGER
from .persistence import SaveStore
from .world import World

logger = logging.getLogger(__name__)


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None,
                   help="Terrain seed. Omit for a random run.")
    p.add_argument("--save", type=str, default=None,
                   help="Save file path (default ~/.endless_platformer/save.json)")
    p.add_argument("--no-save", action="store_true", help="Do not read or write progress")
    p.add_argument("--log-level", type=str, default="INFO")
    return p.parse_args()


def draw_world(screen: pygame.Surface, world: World, font=None):
    """Render the current world state; reads only, never mutates."""
    cos = world.cosmetics
    cam_x = world.camera.x
    screen.fill(cos.color("background"))

    world.level.draw(screen, cam_x, cos.platform_color, COLOR_FOOD, COLOR_POWERUP)

    # Particles, faded by remaining life
    for p in world.effects.particles:
        size = max(1, int(p.size))
        surf = pygame.Surface((size * 2, size * 2), pygame.SRCALPHA)
        pygame.draw.circle(surf, (*p.color, int(255 * p.alpha)), (size, size), size)
        screen.blit(surf, (int(p.x - cam_x) - size, int(p.y) - size))

    player = world.player
    cx, cy = player.center
    if world.effects.orbiters_visible(player):
        for orb in world.effects.orbiters:
            ox, oy = orb.position(cx, cy)
            pygame.draw.circle(screen, orb.color, (int(ox - cam_x), int(oy)),
                               max(1, int(orb.thickness + orb.length / 4)))

    # Player square rotated around its centre
    body = pygame.Surface((int(player.width), int(player.height)), pygame.SRCALPHA)
    body.fill(cos.color("player") if world.alive else COLOR_DANGER)
    rotated = pygame.transform.rotate(body, -math.degrees(player.rotation))
    screen.blit(rotated, rotated.get_rect(center=(int(cx - cam_x), int(cy))))

    if font is None:
        return
    combo = world.combo
    hud = f"Score: {world.score}   Combo: x{combo.multiplier} ({combo.count})"
    if world.collectibles.boosted:
        hud += f"   Boost: {world.collectibles.boost_ticks // FPS + 1}s"
    screen.blit(font.render(hud, True, COLOR_FG), (12, 10))
    screen.blit(font.render("ARROWS/WASD move | SPACE jump | ESC quit", True, COLOR_FG), (12, 32))
    if world.cheat_message:
        msg = font.render(world.cheat_message, True, COLOR_DANGER)
        screen.blit(msg, ((WIDTH - msg.get_width()) // 2, 70))


def draw_death_overlay(screen: pygame.Surface, world: World, font, rect: pygame.Rect):
    pygame.draw.rect(screen, (40, 60, 90), rect, border_radius=10)
    pygame.draw.rect(screen, (90, 130, 180), rect, width=2, border_radius=10)
    t1 = font.render(f"Final score: {world.score}", True, (220, 235, 255))
    screen.blit(t1, (rect.centerx - t1.get_width() // 2, rect.centery - t1.get_height() - 5))
    t2 = font.render("Restart (R)", True, (220, 235, 255))
    screen.blit(t2, (rect.centerx - t2.get_width() // 2, rect.centery + 5))


def run():
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO),
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")

    store = None if args.no_save else SaveStore(args.save)
    world = World(seed=args.seed, store=store)
    logger.info("seed %d, score %d", world.seed, world.score)

    pygame.init()
    pygame.display.set_caption("Endless Platformer")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("jetbrainsmono", 18)

    btn_w, btn_h = 220, 70
    restart_rect = pygame.Rect((WIDTH - btn_w) // 2, (HEIGHT - btn_h) // 2, btn_w, btn_h)

    while True:
        clock.tick(FPS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    pygame.quit(); sys.exit()
                if event.key == K_r and not world.alive:
                    world.restart()
                    continue
                world.input.press(event.key)
                if event.unicode:
                    world.type_char(event.unicode)
            if event.type == pygame.KEYUP:
                world.input.release(event.key)
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and not world.alive:
                if restart_rect.collidepoint(event.pos):
                    world.restart()

        world.tick()

        draw_world(screen, world, font)
        if not world.alive:
            draw_death_overlay(screen, world, font, restart_rect)
        pygame.display.flip()


if __name__ == "__main__":
    run()
