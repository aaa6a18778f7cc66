"""
Point d'entrée en ligne de commande de System Info Lite

Affiche l'instantané système (ou une seule catégorie) au format JSON.
Les champs absents sont omis de la sortie.
"""

import argparse
import json
import sys

from . import __version__
from .core.aggregator import SystemInfoAggregator
from .core.config import InfoConfig, create_default_config
from .core.logger import InfoLogger

CATEGORIES = ('all', 'cpu', 'ram', 'gpu', 'os')


def collect(aggregator: SystemInfoAggregator, category: str):
    """
    Collecte une catégorie et la convertit en structure sérialisable

    Args:
        aggregator: Agrégateur à interroger
        category: 'all', 'cpu', 'ram', 'gpu' ou 'os'

    Returns:
        dict ou list: Données prêtes pour json.dumps
    """
    if category == 'cpu':
        return aggregator.get_cpu_info().to_dict()
    elif category == 'ram':
        return aggregator.get_ram_info().to_dict()
    elif category == 'gpu':
        return [gpu.to_dict() for gpu in aggregator.get_gpu_info()]
    elif category == 'os':
        return aggregator.get_os_info().to_dict()
    return aggregator.get_system_info().to_dict()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='system-info-lite',
        description='Affiche les informations CPU, RAM, GPU et OS de la machine au format JSON'
    )

    parser.add_argument(
        '--category', '-C',
        choices=CATEGORIES,
        default='all',
        help='Catégorie à collecter (défaut: all)'
    )

    parser.add_argument(
        '--config', '-c',
        type=str,
        help='Chemin vers le fichier de configuration'
    )

    parser.add_argument(
        '--log-level', '-l',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Niveau de log (sur stderr), surcharge la configuration'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        help='Fichier de sortie JSON (défaut: sortie standard)'
    )

    parser.add_argument(
        '--compact',
        action='store_true',
        help='JSON sur une seule ligne'
    )

    parser.add_argument(
        '--create-config',
        metavar='PATH',
        type=str,
        help='Crée un fichier de configuration par défaut puis quitte'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.create_config:
        try:
            create_default_config(args.create_config)
        except OSError as e:
            sys.stderr.write(f"Erreur création configuration: {e}\n")
            return 1
        sys.stderr.write(f"Configuration par défaut créée: {args.create_config}\n")
        return 0

    config = InfoConfig(args.config)
    config.set('logging', 'console', 'true')
    if args.log_level:
        config.set('logging', 'log_level', args.log_level)

    for error in config.validate():
        sys.stderr.write(f"Erreur de configuration: {error}\n")

    logger = InfoLogger(config).get_logger()
    aggregator = SystemInfoAggregator(config=config, logger=logger)

    data = collect(aggregator, args.category)
    output = json.dumps(data, indent=None if args.compact else 2, ensure_ascii=False)

    if args.output:
        try:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(output + '\n')
        except OSError as e:
            logger.error(f"Écriture impossible dans {args.output}: {e}")
            return 1
        logger.info(f"Données sauvegardées dans: {args.output}")
    else:
        print(output)

    return 0


if __name__ == '__main__':
    sys.exit(main())
